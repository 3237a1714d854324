"""Per-member heart (like) toggling on proofs."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from seed_mission.core.errors import NotFoundError
from seed_mission.models import Heart, Proof
from seed_mission.schemas.proof import HeartToggleResult

logger = logging.getLogger(__name__)


def heart_count(db: Session, proof_id: int) -> int:
    return int(db.scalar(select(func.count(Heart.id)).where(Heart.proof_id == proof_id)) or 0)


def insert_heart(db: Session, proof_id: int, member_id: int) -> bool:
    """Insert a heart inside a savepoint.

    Returns False when the unique constraint reports that a concurrent
    request already inserted the same (proof, member) heart.
    """
    try:
        with db.begin_nested():
            db.add(Heart(proof_id=proof_id, member_id=member_id))
    except IntegrityError:
        logger.info("Heart on proof %s by member %s already present", proof_id, member_id)
        return False
    return True


def toggle_heart(db: Session, proof_id: int, member_id: int) -> HeartToggleResult:
    """Flip the caller's heart on a proof.

    The existing heart is deleted first; only when nothing was deleted is a
    new one inserted. A duplicate insert from a racing request is absorbed
    by the unique constraint, so a (proof, member) pair never holds more
    than one heart.

    Raises:
        NotFoundError: If the proof does not exist.
    """
    if db.get(Proof, proof_id) is None:
        raise NotFoundError("Proof not found")

    removed = db.execute(
        delete(Heart).where(Heart.proof_id == proof_id, Heart.member_id == member_id)
    ).rowcount
    if removed:
        liked = False
    else:
        insert_heart(db, proof_id, member_id)
        liked = True
    db.commit()

    total = heart_count(db, proof_id)
    logger.debug("Member %s toggled heart on proof %s -> %s (%d)", member_id, proof_id, liked, total)
    return HeartToggleResult(proof_id=proof_id, liked=liked, heart_count=total)
