"""Community creation, lookup and joining."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from seed_mission.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from seed_mission.models import Community, Member, Participant
from seed_mission.schemas.community import CommunityCreate, CommunityProgress, JoinResponse
from seed_mission.services.date_status import DateStatus, classify
from seed_mission.services.membership import is_participant, participant_count
from seed_mission.services.progress import (
    certified_proof_count,
    completion_percent,
    fill_percent,
)

logger = logging.getLogger(__name__)


def get_community_or_404(db: Session, community_id: int) -> Community:
    community = db.get(Community, community_id)
    if community is None:
        raise NotFoundError("Community not found")
    return community


def to_community_progress(
    db: Session,
    community: Community,
    caller_id: int | None,
) -> CommunityProgress:
    """Assemble a community view with fill, completion and date status."""
    joined = participant_count(db, community.id)
    return CommunityProgress(
        community_id=community.id,
        title=community.title,
        image=community.image,
        is_writer=caller_id is not None and community.creator_id == caller_id,
        participant_count=joined,
        capacity=community.capacity,
        current_percent=fill_percent(joined, community.capacity),
        success_percent=completion_percent(
            certified_proof_count(db, community), community.limit_score
        ),
        start_date=community.start_date,
        end_date=community.end_date,
        date_status=classify(community.start_date, community.end_date),
    )


def create_community(db: Session, creator: Member, payload: CommunityCreate) -> CommunityProgress:
    """Open a new community; its creator becomes the first participant."""
    if payload.end_date < payload.start_date:
        raise InvalidInputError("End date must not precede start date")
    community = Community(
        title=payload.title,
        content=payload.content,
        image=payload.image,
        creator_id=creator.id,
        capacity=payload.capacity,
        limit_score=payload.limit_score,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    community.participants.append(Participant(member_id=creator.id, nickname=creator.nickname))
    db.add(community)
    db.flush()
    view = to_community_progress(db, community, creator.id)
    db.commit()
    logger.info("Member %s created community %s", creator.id, community.id)
    return view


def get_community(db: Session, community_id: int, caller_id: int | None = None) -> CommunityProgress:
    return to_community_progress(db, get_community_or_404(db, community_id), caller_id)


def join_community(db: Session, community_id: int, member: Member) -> JoinResponse:
    """Add `member` to the community roster.

    Raises:
        NotFoundError: If the community does not exist.
        ForbiddenError: If the community has already ended.
        ConflictError: If the member already joined or the roster is full.
    """
    community = get_community_or_404(db, community_id)
    if classify(community.start_date, community.end_date) is DateStatus.ENDED:
        raise ForbiddenError("This community has already ended")
    if is_participant(db, community.id, member.id):
        raise ConflictError("Already joined this community")
    if participant_count(db, community.id) >= community.capacity:
        raise ConflictError("This community is full")

    db.add(Participant(community_id=community.id, member_id=member.id, nickname=member.nickname))
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("Already joined this community") from err
    logger.info("Member %s joined community %s", member.id, community.id)
    return JoinResponse(community_id=community.id, joined=True)
