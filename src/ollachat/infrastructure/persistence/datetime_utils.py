"""Datetime utilities for persistence layer."""

from datetime import datetime, timezone


def normalize_to_utc(dt: datetime) -> datetime:
    """Ensure datetime is UTC and timezone-aware.

    Stored timestamps may lack timezone info. This function:
    - Adds UTC timezone to naive datetimes (treating them as UTC).
    - Converts timezone-aware datetimes to UTC.

    Args:
        dt: datetime to process

    Returns:
        timezone-aware datetime in UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Args:
        value: ISO-8601 string (a trailing "Z" is accepted).

    Returns:
        timezone-aware datetime in UTC
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return normalize_to_utc(datetime.fromisoformat(value))
