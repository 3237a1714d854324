"""Member-related Pydantic schemas."""

import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserInfo(BaseModel):
    """Profile and progress of a member."""

    id: int
    nickname: str
    username: str
    profile_image: str | None
    level: int
    total_clear: int
    current_exp: int
    needed_exp_for_next_level: int
    is_secret: bool
    login_type: str


class NicknameRequest(BaseModel):
    """Schema for checking or changing a nickname."""

    nickname: str = Field(..., min_length=2, max_length=12)


class NicknameResponse(BaseModel):
    nickname: str
    success: bool


class NicknameAvailability(BaseModel):
    nickname: str
    available: bool


class SecretResponse(BaseModel):
    is_secret: bool


class ProfileImageResponse(BaseModel):
    profile_image: str


class ClearMissionCreate(BaseModel):
    """Schema for recording a completed mission."""

    mission_name: str = Field(..., min_length=1, max_length=100)


class ClearMissionResponse(BaseModel):
    id: int
    mission_name: str
    cleared_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class DayMissions(BaseModel):
    """Missions a member cleared on one calendar day."""

    clear_date: datetime.date
    missions: list[ClearMissionResponse]
    count: int


class MissionStat(BaseModel):
    """Number of missions cleared on one day."""

    clear_date: datetime.date
    count: int
