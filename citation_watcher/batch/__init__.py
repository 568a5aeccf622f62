"""
Batch processing for Citation Watcher.

Public API:
    - BatchRunner: Per-invocation driver for sentiment rescoring and
      concurrent extraction over many answers
    - StoredCitation, ResponseJob, JobOutcome, BatchSummary: Batch data types
"""

from citation_watcher.batch.runner import (
    BatchRunner,
    BatchSummary,
    JobOutcome,
    ResponseJob,
    StoredCitation,
)

__all__ = [
    "BatchRunner",
    "BatchSummary",
    "JobOutcome",
    "ResponseJob",
    "StoredCitation",
]
