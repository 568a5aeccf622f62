"""
Batch driver for Citation Watcher.

BatchRunner wraps the pure extraction engine for bulk work:

- rescore_sentiment(): page through stored citations and recompute their
  sentiment after a lexicon change
- run_extractions(): run process_response() over many answers with bounded
  concurrency

All driver state (pagination offset, batch counters, throttling delay) lives
on the runner instance, one instance per invocation. Storage is reached only
through the callables passed in, so the runner works against any backend.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel

from citation_watcher.config.schema import EngineRules
from citation_watcher.exceptions import BatchError
from citation_watcher.extractor.orchestrator import (
    Brand,
    Competitor,
    ExtractionResult,
    process_response,
)
from citation_watcher.extractor.sentiment import analyze_sentiment
from citation_watcher.utils.logging import log_with_context
from citation_watcher.utils.time import batch_id_from_timestamp, utc_timestamp

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000
DEFAULT_BATCH_SIZE = 50
DEFAULT_MAX_CONCURRENT = 5


class StoredCitation(BaseModel):
    """A previously stored citation whose sentiment can be recomputed."""

    id: str
    citation_text: str | None = None


@dataclass(frozen=True)
class ResponseJob:
    """
    One answer to run through the extraction engine.

    Each job carries its own immutable snapshot of the brand, competitors
    and source URLs.
    """

    job_id: str
    text: str
    brand: Brand
    competitors: tuple[Competitor, ...] = ()
    citation_urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class JobOutcome:
    """Result of one ResponseJob: either a result or an error message."""

    job_id: str
    result: ExtractionResult | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class BatchSummary:
    """Counters for one rescore_sentiment() run."""

    batch_id: str
    started_at: str
    finished_at: str | None = None
    total: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    failed_ids: list[str] = field(default_factory=list)
    sentiment_counts: dict[str, int] = field(
        default_factory=lambda: {"positive": 0, "neutral": 0, "negative": 0}
    )


FetchPage = Callable[[int, int], Sequence[StoredCitation]]
UpdateSentiment = Callable[[str, str], None]


class BatchRunner:
    """
    Per-invocation batch driver around the extraction engine.

    Args:
        fetch_page: Called as fetch_page(offset, limit); returns up to limit
            stored citations. A page shorter than limit ends pagination.
        update_sentiment: Called as update_sentiment(citation_id, sentiment)
            to persist a recomputed label
        page_size: Citations requested per fetch_page call
        batch_size: Citations rescored between progress logs / delays
        delay_seconds: Sleep between batches to throttle the storage backend
        rules: Classification rules; bundled v1 rules if None

    Example:
        >>> store = {"c1": "Acme is excellent"}
        >>> runner = BatchRunner(
        ...     fetch_page=lambda offset, limit: [
        ...         StoredCitation(id=k, citation_text=v)
        ...         for k, v in list(store.items())[offset:offset + limit]
        ...     ],
        ...     update_sentiment=lambda cid, s: None,
        ... )
        >>> runner.rescore_sentiment().updated
        1
    """

    def __init__(
        self,
        fetch_page: FetchPage | None = None,
        update_sentiment: UpdateSentiment | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay_seconds: float = 0.0,
        rules: EngineRules | None = None,
    ):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got: {page_size}")
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got: {batch_size}")
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds cannot be negative, got: {delay_seconds}")

        self.fetch_page = fetch_page
        self.update_sentiment = update_sentiment
        self.page_size = page_size
        self.batch_size = batch_size
        self.delay_seconds = delay_seconds
        self.rules = rules

        self.batch_id = batch_id_from_timestamp()
        self.pages_fetched = 0
        self.batches_processed = 0

    def collect(self) -> list[StoredCitation]:
        """
        Fetch every stored citation, page by page.

        Returns:
            All citations in fetch order

        Raises:
            BatchError: If no fetch_page callable was given or it fails
        """
        if self.fetch_page is None:
            raise BatchError("BatchRunner was created without fetch_page")

        citations: list[StoredCitation] = []
        offset = 0
        while True:
            logger.debug(f"Fetching page {self.pages_fetched + 1} (offset={offset})")
            try:
                page = list(self.fetch_page(offset, self.page_size))
            except Exception as e:
                raise BatchError(
                    f"fetch_page failed at offset {offset}: {e}"
                ) from e

            self.pages_fetched += 1
            citations.extend(page)
            offset += len(page)

            if len(page) < self.page_size:
                break

        return citations

    def rescore_sentiment(self) -> BatchSummary:
        """
        Recompute and persist sentiment for every stored citation.

        Citations without text are skipped. A failing update is logged and
        counted; the run carries on with the next citation.

        Returns:
            BatchSummary with per-label counts and failed citation ids

        Raises:
            BatchError: If update_sentiment is missing or fetching fails
        """
        if self.update_sentiment is None:
            raise BatchError("BatchRunner was created without update_sentiment")

        summary = BatchSummary(batch_id=self.batch_id, started_at=utc_timestamp())
        citations = self.collect()
        summary.total = len(citations)

        log_with_context(
            logger,
            logging.INFO,
            f"Rescoring sentiment for {summary.total} citations",
            context={"page_size": self.page_size, "batch_size": self.batch_size},
            batch_id=self.batch_id,
        )

        for start in range(0, len(citations), self.batch_size):
            if start > 0 and self.delay_seconds:
                time.sleep(self.delay_seconds)

            for citation in citations[start : start + self.batch_size]:
                if not citation.citation_text:
                    summary.skipped += 1
                    continue

                sentiment = analyze_sentiment(citation.citation_text, self.rules)
                try:
                    self.update_sentiment(citation.id, sentiment)
                except Exception as e:
                    logger.error(f"Error updating citation {citation.id}: {e}")
                    summary.failed += 1
                    summary.failed_ids.append(citation.id)
                    continue

                summary.updated += 1
                summary.sentiment_counts[sentiment] += 1

            self.batches_processed += 1
            logger.debug(
                f"Batch {self.batches_processed}: "
                f"{summary.updated + summary.skipped + summary.failed}/{summary.total}"
            )

        summary.finished_at = utc_timestamp()
        log_with_context(
            logger,
            logging.INFO,
            "Sentiment rescore complete",
            context={
                "updated": summary.updated,
                "skipped": summary.skipped,
                "failed": summary.failed,
            },
            batch_id=self.batch_id,
        )
        return summary

    async def run_extractions(
        self,
        jobs: Sequence[ResponseJob],
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    ) -> list[JobOutcome]:
        """
        Run the extraction engine over many answers concurrently.

        Jobs share no mutable state; each one runs process_response() in a
        worker thread, at most max_concurrent at a time. A failing job is
        reported in its JobOutcome and does not affect the others.

        Args:
            jobs: Answers to process
            max_concurrent: Upper bound on jobs running at once

        Returns:
            One JobOutcome per job, in input order
        """
        if max_concurrent <= 0:
            raise ValueError(f"max_concurrent must be positive, got: {max_concurrent}")

        semaphore = asyncio.Semaphore(max_concurrent)
        logger.info(
            f"Processing {len(jobs)} responses (max {max_concurrent} concurrent)"
        )

        async def _run_job_with_semaphore(job: ResponseJob) -> ExtractionResult:
            async with semaphore:
                return await asyncio.to_thread(
                    process_response,
                    job.text,
                    job.brand,
                    job.competitors,
                    job.citation_urls,
                    self.rules,
                )

        results = await asyncio.gather(
            *(_run_job_with_semaphore(job) for job in jobs), return_exceptions=True
        )

        outcomes = []
        for job, result in zip(jobs, results, strict=True):
            if isinstance(result, Exception):
                logger.error(f"Job {job.job_id} failed: {result}")
                outcomes.append(JobOutcome(job_id=job.job_id, error=str(result)))
            else:
                outcomes.append(JobOutcome(job_id=job.job_id, result=result))

        succeeded = sum(1 for outcome in outcomes if outcome.succeeded)
        log_with_context(
            logger,
            logging.INFO,
            f"Processed {succeeded}/{len(jobs)} responses",
            context={"failed": len(jobs) - succeeded},
            batch_id=self.batch_id,
        )
        return outcomes
