"""JWT helpers for member authentication."""

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

from jose import JWTError, jwt

from seed_mission.core.settings import settings

TokenType = Literal["access", "refresh"]


class TokenError(ValueError):
    """Raised when a token cannot be decoded or has the wrong shape."""


def _encode(claims: dict[str, Any], expires_in: timedelta) -> str:
    to_encode = dict(claims)
    to_encode["exp"] = datetime.now(UTC) + expires_in
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def create_access_token(member_id: int, nickname: str) -> str:
    """Create a short-lived access token for an authenticated member."""
    return _encode(
        {"sub": str(member_id), "nickname": nickname, "type": "access"},
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(member_id: int) -> str:
    """Create a refresh token; each call yields a distinct token."""
    return _encode(
        {"sub": str(member_id), "type": "refresh", "jti": secrets.token_hex(8)},
        timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str, expected_type: TokenType = "access") -> dict[str, Any]:
    """Decode and validate a token, returning its claims.

    Raises:
        TokenError: If the signature, expiry, subject or type is invalid.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise TokenError("Could not validate credentials") from err

    if payload.get("type") != expected_type:
        raise TokenError(f"Expected a {expected_type} token")
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise TokenError("Could not validate credentials")
    return payload


def member_id_from(payload: dict[str, Any]) -> int:
    """Return the member id carried in a decoded token."""
    return int(payload["sub"])
