"""Member profile, privacy, progress and account lifecycle."""
from __future__ import annotations

import datetime
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from seed_mission.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from seed_mission.core.settings import settings
from seed_mission.db.time import day_span
from seed_mission.models import ClearMission, Community, Member, Participant
from seed_mission.schemas.community import CommunityProgress
from seed_mission.schemas.member import (
    ClearMissionResponse,
    DayMissions,
    MissionStat,
    UserInfo,
)
from seed_mission.services.community_service import to_community_progress
from seed_mission.services.progress import level_progress
from seed_mission.services.storage import FilePayload, ObjectStorage, discard_quietly
from seed_mission.services.token_store import RefreshTokenStore

logger = logging.getLogger(__name__)

# Longest range `mission_stats` reports in one response, in days.
MAX_STATS_SPAN_DAYS = 366

__all__ = [
    "get_member_or_404",
    "get_my_page",
    "get_user_info",
    "is_nickname_available",
    "update_nickname",
    "toggle_secret",
    "change_profile_image",
    "withdraw",
    "list_group_missions",
    "missions_on_day",
    "mission_stats",
    "record_clear_mission",
]


def get_member_or_404(db: Session, member_id: int) -> Member:
    member = db.get(Member, member_id)
    if member is None:
        raise NotFoundError("Member not found")
    return member


def clear_count(db: Session, member_id: int) -> int:
    stmt = select(func.count(ClearMission.id)).where(ClearMission.member_id == member_id)
    return int(db.scalar(stmt) or 0)


def to_user_info(db: Session, member: Member) -> UserInfo:
    """Assemble the profile view of a member."""
    total = clear_count(db, member.id)
    progress = level_progress(total)
    return UserInfo(
        id=member.id,
        nickname=member.nickname,
        username=member.username,
        profile_image=member.profile_image,
        level=progress.level,
        total_clear=total,
        current_exp=progress.current_exp,
        needed_exp_for_next_level=progress.needed_exp,
        is_secret=member.is_secret,
        login_type=member.login_type,
    )


def get_my_page(db: Session, member: Member) -> UserInfo:
    return to_user_info(db, member)


def get_user_info(db: Session, member_id: int, caller_id: int | None) -> UserInfo:
    """Look up another member's profile.

    A secret profile is only visible to its owner.

    Raises:
        NotFoundError: If the member does not exist.
        ForbiddenError: If the profile is secret and the caller is someone else.
    """
    member = get_member_or_404(db, member_id)
    if member.is_secret and caller_id != member.id:
        raise ForbiddenError("This user's profile is closed")
    return to_user_info(db, member)


def _check_banned_words(nickname: str) -> None:
    lowered = nickname.lower()
    for word in settings.banned_nickname_words:
        if word and word.lower() in lowered:
            raise InvalidInputError("Nickname contains a forbidden word")


def is_nickname_available(db: Session, nickname: str) -> bool:
    stmt = select(Member.id).where(Member.nickname == nickname)
    return db.scalar(stmt) is None


def update_nickname(db: Session, member: Member, nickname: str) -> Member:
    """Change a member's nickname.

    Keeping the current nickname is a no-op.

    Raises:
        InvalidInputError: If the nickname contains a banned word.
        ConflictError: If another member already uses the nickname.
    """
    if nickname == member.nickname:
        return member
    _check_banned_words(nickname)
    if not is_nickname_available(db, nickname):
        raise ConflictError("Nickname is already taken")
    member.nickname = nickname
    db.commit()
    db.refresh(member)
    logger.info("Member %s changed nickname", member.id)
    return member


def toggle_secret(db: Session, member: Member) -> bool:
    """Flip the privacy flag and return its new value."""
    member.is_secret = not member.is_secret
    db.commit()
    return member.is_secret


def change_profile_image(
    db: Session,
    storage: ObjectStorage,
    member: Member,
    file: FilePayload | None,
) -> str:
    """Upload a new profile image and point the member at it.

    Raises:
        InvalidInputError: If no file was supplied.
        ExternalIOError: If storage fails.
    """
    if file is None or not file.content:
        raise InvalidInputError("A profile image file is required")
    previous = storage.file_name_for(member.profile_image) if member.profile_image else None
    stored = storage.upload(file)
    member.profile_image = stored.url
    db.commit()
    if previous is not None:
        discard_quietly(storage, [previous])
    return stored.url


def withdraw(db: Session, member: Member, token_store: RefreshTokenStore | None = None) -> None:
    """Delete a member together with their participations and cleared missions.

    Proofs, comments and hearts keep their plain author ids and cached
    nicknames.
    """
    member_id = member.id
    db.delete(member)
    db.commit()
    if token_store is not None:
        token_store.delete(member_id)
    logger.info("Member %s withdrew", member_id)


def list_group_missions(db: Session, member: Member) -> list[CommunityProgress]:
    """Every community the member joined, with derived progress figures."""
    stmt = (
        select(Community)
        .join(Participant, Participant.community_id == Community.id)
        .where(Participant.member_id == member.id)
        .order_by(Community.created_at.desc(), Community.id.desc())
    )
    return [to_community_progress(db, community, member.id) for community in db.scalars(stmt)]


def missions_on_day(db: Session, member: Member, day: datetime.date) -> DayMissions:
    """Missions the member cleared on `day` (UTC)."""
    start, end = day_span(day)
    stmt = (
        select(ClearMission)
        .where(
            ClearMission.member_id == member.id,
            ClearMission.cleared_at >= start,
            ClearMission.cleared_at <= end,
        )
        .order_by(ClearMission.cleared_at)
    )
    missions = [ClearMissionResponse.model_validate(row) for row in db.scalars(stmt)]
    return DayMissions(clear_date=day, missions=missions, count=len(missions))


def mission_stats(
    db: Session,
    member: Member,
    start: datetime.date,
    end: datetime.date,
) -> list[MissionStat]:
    """Cleared-mission counts per day within an inclusive date range.

    Days without any cleared mission are reported with a zero count.

    Raises:
        InvalidInputError: If `end` precedes `start` or the range spans more
            than `MAX_STATS_SPAN_DAYS` days.
    """
    if end < start:
        raise InvalidInputError("End date must not precede start date")
    days = (end - start).days + 1
    if days > MAX_STATS_SPAN_DAYS:
        raise InvalidInputError(f"Date range must not exceed {MAX_STATS_SPAN_DAYS} days")
    lower, upper = day_span(start, end)
    stmt = select(ClearMission.cleared_at).where(
        ClearMission.member_id == member.id,
        ClearMission.cleared_at >= lower,
        ClearMission.cleared_at <= upper,
    )
    counts: dict[datetime.date, int] = {}
    for cleared_at in db.scalars(stmt):
        counts[cleared_at.date()] = counts.get(cleared_at.date(), 0) + 1

    return [
        MissionStat(clear_date=day, count=counts.get(day, 0))
        for day in (start + datetime.timedelta(days=offset) for offset in range(days))
    ]


def record_clear_mission(
    db: Session,
    member: Member,
    mission_name: str,
    cleared_at: datetime.datetime | None = None,
) -> ClearMission:
    """Store a cleared mission and re-sync the member's level and experience."""
    mission = ClearMission(member_id=member.id, mission_name=mission_name)
    if cleared_at is not None:
        mission.cleared_at = cleared_at
    db.add(mission)
    db.flush()
    progress = level_progress(clear_count(db, member.id))
    member.level = progress.level
    member.exp = progress.current_exp
    db.commit()
    db.refresh(mission)
    return mission