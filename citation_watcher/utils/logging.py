"""
Structured JSON logging for Citation Watcher.

Provides standardized logging with:
- JSON formatted output to stderr
- UTC timestamps with timezone info
- Structured context fields

All logs use Python's standard logging module with custom formatting.
Log level defaults to INFO, use setup_logging(verbose=True) for DEBUG.

Examples:
    >>> from citation_watcher.utils.logging import setup_logging
    >>> setup_logging(verbose=True)
    >>> logger = logging.getLogger("citation_watcher.extractor.orchestrator")
    >>> logger.info("Extraction complete", extra={"context": {"citations": 5}})

Note:
    Only stderr is used (stdout reserved for user output and JSON results).
"""

import json
import logging
import sys
from typing import Any

from citation_watcher.utils.time import utc_timestamp


class JSONFormatter(logging.Formatter):
    """
    Custom formatter that outputs logs as JSON with structured fields.

    Each log record is formatted as a JSON object with:
    - timestamp: ISO 8601 UTC timestamp
    - level: Log level (INFO, WARNING, ERROR, DEBUG)
    - component: Module/component name (from logger name)
    - message: Human-readable log message
    - context: Additional structured data (from 'context' in extra)
    - batch_id: Current batch identifier (from 'batch_id' in extra, if available)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": utc_timestamp(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "context") and isinstance(record.context, dict):
            log_entry["context"] = record.context

        if hasattr(record, "batch_id"):
            log_entry["batch_id"] = record.batch_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logging(verbose: bool = False, quiet_logs: bool = False) -> None:
    """
    Configure structured JSON logging for the application.

    Sets up:
    - JSON formatter for structured output
    - stderr output (stdout reserved for user-facing content)
    - Log level: DEBUG if verbose=True, INFO otherwise, WARNING if quiet_logs

    Args:
        verbose: If True, set log level to DEBUG. Takes precedence over quiet_logs.
        quiet_logs: If True, only warnings and errors are emitted. Used by the
            CLI in human mode so JSON log lines don't interleave with Rich output.
    """
    root_logger = logging.getLogger()

    if verbose:
        level = logging.DEBUG
    elif quiet_logs:
        level = logging.WARNING
    else:
        level = logging.INFO

    root_logger.setLevel(level)

    # Remove any existing handlers (prevents duplicate logs)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())

    root_logger.addHandler(handler)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: dict[str, Any] | None = None,
    batch_id: str | None = None,
) -> None:
    """
    Log a message with structured context and optional batch_id.

    Equivalent to logger.log(level, message, extra={'context': {...}, 'batch_id': '...'})

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, logging.WARNING, etc.)
        message: Human-readable log message
        context: Optional dict with additional structured data
        batch_id: Optional batch identifier to include in log

    Example:
        >>> logger = logging.getLogger("citation_watcher.batch.runner")
        >>> log_with_context(
        ...     logger,
        ...     logging.INFO,
        ...     "Batch rescored",
        ...     context={"updated": 50, "failed": 0},
        ...     batch_id="2025-11-02T08-30-00Z"
        ... )
    """
    extra = {}

    if context is not None:
        extra["context"] = context

    if batch_id is not None:
        extra["batch_id"] = batch_id

    logger.log(level, message, extra=extra if extra else None)
