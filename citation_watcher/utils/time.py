"""
UTC timestamp utilities for Citation Watcher.

All timestamps MUST be in UTC with explicit timezone markers.

This module provides:
- utc_now(): Current time as timezone-aware datetime
- utc_timestamp(): ISO 8601 timestamp string with 'Z' suffix
- batch_id_from_timestamp(): Filesystem-safe timestamp slug for batch IDs

Examples:
    >>> from citation_watcher.utils.time import utc_now, utc_timestamp
    >>> utc_timestamp()
    '2025-11-02T08:30:45Z'
    >>> batch_id_from_timestamp()
    '2025-11-02T08-30-45Z'
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return current time in UTC with timezone info.

    Returns:
        datetime: Current UTC time with tzinfo=timezone.utc

    Note:
        NEVER use datetime.now() without timezone parameter.
        NEVER use datetime.utcnow() (deprecated, returns naive datetime).
    """
    return datetime.now(UTC)


def utc_timestamp() -> str:
    """
    Return ISO 8601 timestamp string with 'Z' suffix.

    Format: YYYY-MM-DDTHH:MM:SSZ (with colons in time)
    Example: 2025-11-02T08:30:45Z

    Used for log records and batch summaries.
    """
    return utc_now().strftime("%Y-%m-%dT%H:%M:%SZ")


def batch_id_from_timestamp(dt: datetime | None = None) -> str:
    """
    Generate a batch_id slug from a UTC timestamp.

    Format: YYYY-MM-DDTHH-MM-SSZ (hyphens instead of colons), so the
    identifier is filesystem-safe and sorts chronologically.

    Args:
        dt: Optional datetime to convert. If None, uses utc_now().
            Must be timezone-aware if provided.

    Returns:
        str: Filesystem-safe timestamp slug

    Raises:
        ValueError: If dt is provided but is naive (missing timezone)

    Examples:
        >>> from datetime import datetime, timezone
        >>> batch_id_from_timestamp(datetime(2025, 11, 2, 8, 30, 45, tzinfo=timezone.utc))
        '2025-11-02T08-30-45Z'
    """
    if dt is None:
        dt = utc_now()

    if dt.tzinfo is None:
        raise ValueError(
            "Datetime must be timezone-aware (use timezone.utc). "
            "Got naive datetime. Use utc_now() or ensure dt has tzinfo set."
        )

    return dt.strftime("%Y-%m-%dT%H-%M-%SZ")
