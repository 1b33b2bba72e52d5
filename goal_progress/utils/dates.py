"""Datetime helpers.

Mongo returns naive datetimes in UTC, so every datetime the services compare
is kept naive UTC as well.
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Drop timezone info after converting to UTC.

    Examples:
        >>> from datetime import timedelta
        >>> as_naive_utc(datetime(2025, 1, 1, 3, tzinfo=timezone(timedelta(hours=3))))
        datetime.datetime(2025, 1, 1, 0, 0)
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
