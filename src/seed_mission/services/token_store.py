"""Refresh-token storage backed by Redis."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

import redis

from seed_mission.core.settings import settings

logger = logging.getLogger(__name__)


def refresh_key(member_id: int) -> str:
    return f"refresh:{member_id}"


class RefreshTokenStore:
    """Keeps the single live refresh token of each member.

    Logging out or withdrawing deletes the key, which invalidates any
    refresh token still held by the client.
    """

    def __init__(self, client: Any) -> None:
        self._redis = client

    def save(self, member_id: int, token: str, ttl_seconds: int | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else settings.refresh_token_ttl_seconds
        self._redis.set(refresh_key(member_id), token, ex=ttl)
        logger.debug("Stored refresh token for member %s", member_id)

    def get(self, member_id: int) -> str | None:
        value = self._redis.get(refresh_key(member_id))
        if isinstance(value, bytes):
            return value.decode()
        return value

    def delete(self, member_id: int) -> bool:
        """Drop the stored token; returns False when none was stored."""
        removed = bool(self._redis.delete(refresh_key(member_id)))
        logger.debug("Dropped refresh token for member %s (present=%s)", member_id, removed)
        return removed

    def matches(self, member_id: int, token: str) -> bool:
        stored = self.get(member_id)
        return stored is not None and stored == token


@lru_cache(maxsize=1)
def get_token_store() -> RefreshTokenStore:
    """Return the shared refresh-token store."""
    client = redis.Redis.from_url(settings.redis_url, decode_responses=True)
    return RefreshTokenStore(client)
