"""
UTC datetime utilities for publish timestamps.

Publish timestamps arrive from the API as ISO-8601 strings or epoch
numbers; these helpers normalize them to timezone-aware UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_timestamp_utc(value: str | int | float | None) -> datetime | None:
    """
    Parse an API timestamp into a UTC-aware datetime.

    Accepts ISO-8601 strings (a trailing "Z" is allowed), Unix timestamps in
    seconds, or millisecond timestamps (values above 1e11 are treated as ms).

    Args:
        value: Raw timestamp from the API, or None

    Returns:
        UTC-aware datetime, or None when value is None or empty

    Raises:
        ValueError: If a string value is not valid ISO-8601
    """
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        seconds = value / 1000 if value > 1e11 else value
        return datetime.fromtimestamp(seconds, tz=UTC)
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    return ensure_utc(datetime.fromisoformat(text))
