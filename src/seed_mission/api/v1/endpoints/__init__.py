# src/seed_mission/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .communities import router as communities_router
from .members import router as members_router
from .proofs import router as proofs_router

__all__ = [
    "auth_router",
    "communities_router",
    "members_router",
    "proofs_router",
]
