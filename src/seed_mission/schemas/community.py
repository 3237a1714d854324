# src/seed_mission/schemas/community.py
"""Community-related Pydantic schemas."""

import datetime

from pydantic import BaseModel, Field

from seed_mission.services.date_status import DateStatus


class CommunityCreate(BaseModel):
    """Schema for creating a new community."""

    title: str = Field(..., min_length=1, max_length=100)
    content: str | None = None
    image: str | None = None
    capacity: int = Field(..., ge=1, description="Maximum number of participants")
    limit_score: int = Field(..., ge=1, description="Certified proofs needed for completion")
    start_date: datetime.date
    end_date: datetime.date


class CommunityProgress(BaseModel):
    """A community with its derived progress figures."""

    community_id: int
    title: str
    image: str | None
    is_writer: bool
    participant_count: int
    capacity: int
    current_percent: float = Field(..., description="Participants as a share of capacity")
    success_percent: float = Field(..., description="Certified proofs as a share of limit_score")
    start_date: datetime.date
    end_date: datetime.date
    date_status: DateStatus


class JoinResponse(BaseModel):
    community_id: int
    joined: bool
