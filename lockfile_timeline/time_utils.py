"""
Shared datetime helpers.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def from_epoch(seconds: int) -> datetime:
    """Convert a unix timestamp to a UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def parse_date(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp or YYYY-MM-DD date and normalize it to UTC.

    A bare date means midnight, or its last microsecond when ``end_of_day`` is set.
    """
    if not value:
        return None
    value = value.strip()
    try:
        day = date.fromisoformat(value)
    except ValueError:
        day = None
    if day is not None:
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        if end_of_day:
            return start + timedelta(days=1) - timedelta(microseconds=1)
        return start

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_utc(parsed)


def format_timestamp(dt: datetime) -> str:
    return ensure_utc(dt).strftime(TIMESTAMP_FORMAT)
