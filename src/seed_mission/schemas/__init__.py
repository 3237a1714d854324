# src/seed_mission/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import ReissueRequest, TokenResponse
from .community import CommunityCreate, CommunityProgress, JoinResponse
from .member import (
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
from .proof import (
    CommentCreate,
    CommentResponse,
    HeartToggleResult,
    ImageResponse,
    ProofCount,
    ProofSummary,
)

__all__ = [
    "ReissueRequest", "TokenResponse",
    "CommunityCreate", "CommunityProgress", "JoinResponse",
    "ClearMissionCreate", "ClearMissionResponse", "DayMissions", "MissionStat",
    "NicknameAvailability", "NicknameRequest", "NicknameResponse",
    "ProfileImageResponse", "SecretResponse", "UserInfo",
    "CommentCreate", "CommentResponse", "HeartToggleResult", "ImageResponse",
    "ProofCount", "ProofSummary",
]
