# src/seed_mission/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    communities_router,
    members_router,
    proofs_router,
)

__all__ = [
    "auth_router",
    "communities_router",
    "members_router",
    "proofs_router",
]
