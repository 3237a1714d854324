"""Participation checks gating proof creation."""

from __future__ import annotations

from sqlalchemy import exists, func, select
from sqlalchemy.orm import Session

from seed_mission.models import Participant


def is_participant(db: Session, community_id: int, member_id: int | None) -> bool:
    """Return True if `member_id` is on the roster of `community_id`."""
    if member_id is None:
        return False
    stmt = select(
        exists().where(
            Participant.community_id == community_id,
            Participant.member_id == member_id,
        )
    )
    return bool(db.scalar(stmt))


def participant_count(db: Session, community_id: int) -> int:
    """Return how many members have joined the community."""
    return int(
        db.scalar(
            select(func.count(Participant.id)).where(Participant.community_id == community_id)
        )
        or 0
    )
