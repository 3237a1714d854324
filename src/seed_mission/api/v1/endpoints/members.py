"""Member profile, privacy and mission progress endpoints."""

import datetime
from typing import Annotated

from fastapi import APIRouter, File, Query, UploadFile, status

from seed_mission.api.v1.dependencies import (
    CurrentMemberDep,
    OptionalMemberDep,
    SessionDep,
    StorageDep,
    TokenStoreDep,
    read_uploads,
)
from seed_mission.db.time import today
from seed_mission.schemas.community import CommunityProgress
from seed_mission.schemas.member import (
    ClearMissionCreate,
    ClearMissionResponse,
    DayMissions,
    MissionStat,
    NicknameAvailability,
    NicknameRequest,
    NicknameResponse,
    ProfileImageResponse,
    SecretResponse,
    UserInfo,
)
from seed_mission.services import member_service
from seed_mission.services.date_status import parse_date

router = APIRouter(prefix="/members", tags=["members"])

STATS_WINDOW_DAYS = 7


@router.get("/me", response_model=UserInfo)
async def get_my_page(current_member: CurrentMemberDep, db: SessionDep) -> UserInfo:
    """Return the caller's own profile and level progress."""
    return member_service.get_my_page(db, current_member)


@router.get("/nickname/check", response_model=NicknameAvailability)
async def check_nickname(
    db: SessionDep,
    nickname: str = Query(..., min_length=2, max_length=12),
) -> NicknameAvailability:
    return NicknameAvailability(
        nickname=nickname,
        available=member_service.is_nickname_available(db, nickname),
    )


@router.patch("/me/nickname", response_model=NicknameResponse)
async def update_nickname(
    request: NicknameRequest,
    current_member: CurrentMemberDep,
    db: SessionDep,
) -> NicknameResponse:
    """Change the caller's nickname.

    Raises:
        ConflictError: If the nickname is taken
        InvalidInputError: If the nickname contains a banned word
    """
    member = member_service.update_nickname(db, current_member, request.nickname)
    return NicknameResponse(nickname=member.nickname, success=True)


@router.patch("/me/secret", response_model=SecretResponse)
async def toggle_secret(current_member: CurrentMemberDep, db: SessionDep) -> SecretResponse:
    return SecretResponse(is_secret=member_service.toggle_secret(db, current_member))


@router.put("/me/profile-image", response_model=ProfileImageResponse)
async def change_profile_image(
    current_member: CurrentMemberDep,
    db: SessionDep,
    storage: StorageDep,
    file: Annotated[UploadFile | None, File()] = None,
) -> ProfileImageResponse:
    payloads = await read_uploads([file] if file is not None else None)
    url = member_service.change_profile_image(
        db,
        storage,
        current_member,
        payloads[0] if payloads else None,
    )
    return ProfileImageResponse(profile_image=url)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw(
    current_member: CurrentMemberDep,
    db: SessionDep,
    token_store: TokenStoreDep,
) -> None:
    """Delete the caller's account and revoke their refresh token."""
    member_service.withdraw(db, current_member, token_store)


@router.get("/me/communities", response_model=list[CommunityProgress])
async def list_group_missions(
    current_member: CurrentMemberDep,
    db: SessionDep,
) -> list[CommunityProgress]:
    return member_service.list_group_missions(db, current_member)


@router.get("/me/missions", response_model=DayMissions)
async def missions_on_day(
    current_member: CurrentMemberDep,
    db: SessionDep,
    day: str | None = Query(None, description="ISO date, defaults to today"),
) -> DayMissions:
    target = parse_date(day) if day is not None else today()
    return member_service.missions_on_day(db, current_member, target)


@router.get("/me/missions/stats", response_model=list[MissionStat])
async def mission_stats(
    current_member: CurrentMemberDep,
    db: SessionDep,
    start: str | None = Query(None, description="ISO date, defaults to six days before end"),
    end: str | None = Query(None, description="ISO date, defaults to today"),
) -> list[MissionStat]:
    """Cleared-mission counts per day over an inclusive date range."""
    end_day = parse_date(end) if end is not None else today()
    if start is not None:
        start_day = parse_date(start)
    else:
        lookback = min(STATS_WINDOW_DAYS - 1, (end_day - datetime.date.min).days)
        start_day = end_day - datetime.timedelta(days=lookback)
    return member_service.mission_stats(db, current_member, start_day, end_day)


@router.post(
    "/me/missions",
    response_model=ClearMissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_clear_mission(
    mission: ClearMissionCreate,
    current_member: CurrentMemberDep,
    db: SessionDep,
) -> ClearMissionResponse:
    cleared = member_service.record_clear_mission(db, current_member, mission.mission_name)
    return ClearMissionResponse.model_validate(cleared)


@router.get("/{member_id}", response_model=UserInfo)
async def get_user_info(member_id: int, db: SessionDep, caller: OptionalMemberDep) -> UserInfo:
    """Return another member's profile unless it is secret.

    Raises:
        ForbiddenError: If the profile is secret and the caller is not its owner
    """
    caller_id = caller.id if caller is not None else None
    return member_service.get_user_info(db, member_id, caller_id)
