"""Token-related Pydantic schemas."""

from pydantic import BaseModel, Field


class ReissueRequest(BaseModel):
    """Refresh token presented to obtain a new access token."""

    refresh_token: str = Field(..., description="Refresh token issued at login")


class TokenResponse(BaseModel):
    """Freshly issued access token."""

    access_token: str
    token_type: str = "bearer"
