"""Lifecycle labels for a community's date window."""

from __future__ import annotations

import datetime
from enum import Enum

from seed_mission.core.errors import InvalidInputError
from seed_mission.db.time import today


class DateStatus(str, Enum):
    """Where "now" falls relative to a community's start and end dates."""

    BEFORE_START = "before"
    IN_PROGRESS = "ongoing"
    ENDED = "end"


def _as_date(value: datetime.date | datetime.datetime) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


def classify(
    start: datetime.date | datetime.datetime,
    end: datetime.date | datetime.datetime,
    now: datetime.date | datetime.datetime | None = None,
) -> DateStatus:
    """Classify `now` against an inclusive [start, end] window.

    Both boundary days count as in progress.

    Raises:
        InvalidInputError: If `end` precedes `start`.
    """
    start_day, end_day = _as_date(start), _as_date(end)
    if end_day < start_day:
        raise InvalidInputError("End date must not precede start date")
    current = _as_date(now) if now is not None else today()
    if current < start_day:
        return DateStatus.BEFORE_START
    if current > end_day:
        return DateStatus.ENDED
    return DateStatus.IN_PROGRESS


def parse_date(text: str) -> datetime.date:
    """Parse an ISO `YYYY-MM-DD` string.

    Raises:
        InvalidInputError: If the text is not a valid calendar date.
    """
    try:
        return datetime.date.fromisoformat(text.strip())
    except (AttributeError, ValueError) as err:
        raise InvalidInputError(f"Malformed date: {text!r}") from err
