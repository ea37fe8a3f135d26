"""Utility functions for BlogDB.

This module provides common helper functions for datetime handling,
identifier generation, ordering and safe logging of secrets.
"""

import uuid
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any, TypeVar

from dateutil import parser as dateutil_parser  # type: ignore[import-untyped]

T = TypeVar("T")


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse ISO8601 timestamp string into timezone-aware UTC datetime.

    Naive datetimes (as returned by SQLite) are assumed to be UTC.

    Args:
        value: ISO8601 timestamp string, datetime object, or None

    Returns:
        Parsed timezone-aware datetime in UTC, or None if input is None

    Raises:
        ValueError: If timestamp format is invalid

    Example:
        >>> dt = parse_datetime("2024-01-15T10:30:00Z")
        >>> dt.tzinfo
        datetime.timezone.utc
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    dt = dateutil_parser.isoparse(value)

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def utc_now() -> datetime:
    """Get current UTC timestamp as timezone-aware datetime.

    Returns:
        Current datetime in UTC with timezone information
    """
    return datetime.now(UTC)


def format_iso(dt: datetime | None) -> str | None:
    """Format datetime as ISO8601 string with 'Z' suffix.

    Args:
        dt: Datetime object or None

    Returns:
        ISO8601 formatted string or None if input is None

    Example:
        >>> dt = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        >>> format_iso(dt)
        '2024-01-15T10:30:00Z'
    """
    if dt is None:
        return None
    return dt.isoformat().replace("+00:00", "Z")


def new_id() -> str:
    """Generate a new opaque entity identifier."""
    return str(uuid.uuid4())


def redact_token(token: str | None) -> str:
    """Redact sensitive tokens for safe logging.

    Args:
        token: Token string to redact

    Returns:
        Redacted token showing only first 8 and last 4 characters

    Example:
        >>> redact_token("abcdefghijklmnop")
        'abcdefgh...mnop'
        >>> redact_token("short")
        '***'
        >>> redact_token(None)
        'None'
    """
    if not token:
        return "None"
    return f"{token[:8]}...{token[-4:]}" if len(token) > 12 else "***"


def newest_first(items: Iterable[T], key: Callable[[T], Any]) -> list[T]:
    """Sort items by key descending, keeping input order among equal keys.

    ``sorted`` is stable for ``reverse=True`` as well, so ties keep the
    order in which they were supplied.

    Example:
        >>> newest_first([(1, "a"), (2, "b"), (1, "c")], key=lambda t: t[0])
        [(2, 'b'), (1, 'a'), (1, 'c')]
    """
    return sorted(items, key=key, reverse=True)


def oldest_first(items: Iterable[T], key: Callable[[T], Any]) -> list[T]:
    """Sort items by key ascending, keeping input order among equal keys."""
    return sorted(items, key=key)
