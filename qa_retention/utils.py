"""Shared utilities (timestamp parsing and hour arithmetic)."""

from datetime import UTC, datetime
from typing import Any


def ensure_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp from the tracker.

    Accepts datetime instances and strings with a trailing "Z". Anything
    that cannot be read as a timestamp yields None instead of raising, so
    one malformed record cannot break a whole run.

    Args:
        value: Raw value from the API payload or a datetime.

    Returns:
        Aware UTC datetime, or None if the value is missing or malformed.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_utc(parsed)


def hours_between(start: datetime, end: datetime) -> float:
    """Hours elapsed from start to end, rounded to two decimals."""
    return round((end - start).total_seconds() / 3600, 2)


def format_hours(hours: float) -> str:
    """Render an hour count without a trailing .0 (48.0 -> "48", 0.5 -> "0.5")."""
    return f"{hours:g}"
