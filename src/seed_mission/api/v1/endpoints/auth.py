# src/seed_mission/api/v1/endpoints/auth.py
"""Token reissue and logout endpoints.

Social login happens outside this service; it stores the refresh token it
hands out through `RefreshTokenStore`, and these endpoints only rotate
access tokens against that stored value.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from seed_mission.api.v1.dependencies import CurrentMemberDep, SessionDep, TokenStoreDep
from seed_mission.core.security import (
    TokenError,
    create_access_token,
    decode_token,
    member_id_from,
)
from seed_mission.models import Member
from seed_mission.schemas.auth import ReissueRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/reissue", response_model=TokenResponse)
async def reissue(
    request: ReissueRequest,
    db: SessionDep,
    token_store: TokenStoreDep,
) -> TokenResponse:
    """Exchange a live refresh token for a new access token.

    Raises:
        HTTPException: If the refresh token is invalid, revoked or belongs
            to a member who no longer exists
    """
    try:
        payload = decode_token(request.refresh_token, expected_type="refresh")
    except TokenError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        ) from err

    member_id = member_id_from(payload)
    if not token_store.matches(member_id, request.refresh_token):
        logger.info("Rejected revoked refresh token for member %s", member_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token has been revoked",
        )

    member = db.get(Member, member_id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Member not found",
        )
    return TokenResponse(access_token=create_access_token(member.id, member.nickname))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(current_member: CurrentMemberDep, token_store: TokenStoreDep) -> None:
    """Revoke the caller's refresh token."""
    token_store.delete(current_member.id)
    logger.info("Member %s logged out", current_member.id)
