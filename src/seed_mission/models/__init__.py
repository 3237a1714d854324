# src/seed_mission/models/__init__.py
"""SQLAlchemy models for the Seed Mission application."""

from .community import Community, Participant
from .member import ClearMission, Member
from .proof import Comment, Heart, Image, Proof

__all__ = [
    "ClearMission", "Member",
    "Community", "Participant",
    "Comment", "Heart", "Image", "Proof",
]
