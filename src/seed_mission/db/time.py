# src/seed_mission/db/time.py
"""Time utilities for database models."""

from datetime import UTC, date, datetime, time


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def today() -> date:
    """Return the current UTC calendar date."""
    return utcnow().date()


def day_span(first: date, last: date | None = None) -> tuple[datetime, datetime]:
    """Inclusive UTC bounds covering the calendar days `first` through `last`.

    The upper bound is the last microsecond of `last`, so callers compare
    with `<=` and `date.max` never overflows.
    """
    last = first if last is None else last
    return datetime.combine(first, time.min, UTC), datetime.combine(last, time.max, UTC)
