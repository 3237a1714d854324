"""Shared pagination helpers."""
from __future__ import annotations

from seed_mission.core.errors import InvalidInputError


def to_page_index(page: int) -> int:
    """Translate a caller-facing 1-based page number to a 0-based index.

    Raises:
        InvalidInputError: If `page` is smaller than 1.
    """
    if page < 1:
        raise InvalidInputError("Page numbers start at 1")
    return page - 1
