"""Derived progress figures: completion percentages and member levels.

Everything here is integer arithmetic over counts supplied by the database.
Percentages refuse a zero or negative denominator instead of producing NaN
or infinity.
"""

from __future__ import annotations

import datetime
import math
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from seed_mission.core.errors import InvalidInputError
from seed_mission.core.settings import settings
from seed_mission.db.time import day_span
from seed_mission.models import Community, Heart, Participant, Proof
from seed_mission.services.membership import participant_count

CertifiedCounter = Callable[[Session, Community], int]


def percent(part: int, whole: int) -> float:
    """Return `part / whole * 100`.

    Raises:
        InvalidInputError: If `whole` is not positive.
    """
    if whole <= 0:
        raise InvalidInputError("Percentage base must be positive")
    return part / whole * 100


def completion_percent(certified_count: int, limit_score: int) -> float:
    """Share of the community's score target reached by certified proofs."""
    return percent(certified_count, limit_score)


def fill_percent(participants: int, capacity: int) -> float:
    """Share of the community's seats already taken."""
    return percent(participants, capacity)


def _window_bounds(community: Community) -> tuple[datetime.datetime, datetime.datetime]:
    return day_span(community.start_date, community.end_date)


def count_solo_certified(db: Session, community: Community) -> int:
    """Proofs posted inside the community's date window."""
    start, end = _window_bounds(community)
    stmt = select(func.count(Proof.id)).where(
        Proof.community_id == community.id,
        Proof.created_at >= start,
        Proof.created_at <= end,
    )
    return int(db.scalar(stmt) or 0)


def group_heart_threshold(participants: int) -> int:
    """Distinct hearts from other participants a proof needs to be certified."""
    return max(1, math.ceil((participants - 1) / 2))


def count_group_certified(db: Session, community: Community) -> int:
    """Proofs inside the window hearted by enough other participants."""
    start, end = _window_bounds(community)
    threshold = group_heart_threshold(participant_count(db, community.id))
    roster = select(Participant.member_id).where(Participant.community_id == community.id)
    certified = (
        select(Heart.proof_id)
        .join(Proof, Proof.id == Heart.proof_id)
        .where(
            Proof.community_id == community.id,
            Proof.created_at >= start,
            Proof.created_at <= end,
            Heart.member_id.in_(roster),
            Heart.member_id != Proof.author_id,
        )
        .group_by(Heart.proof_id)
        .having(func.count(func.distinct(Heart.member_id)) >= threshold)
    )
    return int(db.scalar(select(func.count()).select_from(certified.subquery())) or 0)


def certified_proof_count(
    db: Session,
    community: Community,
    *,
    solo_counter: CertifiedCounter = count_solo_certified,
    group_counter: CertifiedCounter = count_group_certified,
) -> int:
    """Count certified proofs using the rule for the community's roster size."""
    if participant_count(db, community.id) >= 2:
        return group_counter(db, community)
    return solo_counter(db, community)


@dataclass(frozen=True)
class LevelProgress:
    """A member's level and how far they are into it."""

    level: int
    current_exp: int
    needed_exp: int

    @property
    def remaining_exp(self) -> int:
        return max(0, self.needed_exp - self.current_exp)


def build_level_table(exp_per_level: int, max_level: int) -> dict[int, int]:
    """Experience needed to leave each level; the max level needs none."""
    if exp_per_level <= 0 or max_level < 1:
        raise InvalidInputError("Level table needs positive experience and levels")
    table = {level: exp_per_level for level in range(1, max_level)}
    table[max_level] = 0
    return table


LEVEL_TABLE: dict[int, int] = build_level_table(settings.exp_per_level, settings.max_level)


def needed_exp_for_level(level: int, table: dict[int, int] | None = None) -> int:
    table = LEVEL_TABLE if table is None else table
    return table.get(level, 0)


def level_progress(total_exp: int, table: dict[int, int] | None = None) -> LevelProgress:
    """Walk the level table with `total_exp` earned experience.

    With the default table this is `level = n // 5 + 1` and
    `current_exp = n % 5` until the max level; experience earned past the
    max level stays in `current_exp`.

    Raises:
        InvalidInputError: If `total_exp` is negative.
    """
    if total_exp < 0:
        raise InvalidInputError("Experience cannot be negative")
    table = LEVEL_TABLE if table is None else table
    level, remaining = 1, total_exp
    while table.get(level, 0) > 0 and remaining >= table[level]:
        remaining -= table[level]
        level += 1
    return LevelProgress(
        level=level, current_exp=remaining, needed_exp=needed_exp_for_level(level, table)
    )
