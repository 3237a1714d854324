# src/seed_mission/schemas/proof.py
"""Proof-related Pydantic schemas."""

import datetime

from pydantic import BaseModel, ConfigDict, Field


class ImageResponse(BaseModel):
    """An image attached to a proof."""

    image_id: int
    url: str
    file_name: str


class ProofSummary(BaseModel):
    """Caller-specific view of a proof."""

    proof_id: int
    nickname: str
    title: str
    content: str
    images: list[ImageResponse]
    comment_count: int
    heart_count: int
    is_writer: bool = Field(..., description="True when the caller wrote this proof")
    has_liked: bool = Field(..., description="True when the caller has hearted this proof")
    created_at: datetime.datetime


class ProofCount(BaseModel):
    """Comment and heart totals for a proof."""

    proof_id: int
    comment_count: int
    heart_count: int


class HeartToggleResult(BaseModel):
    """Outcome of toggling a heart."""

    proof_id: int
    liked: bool
    heart_count: int


class CommentCreate(BaseModel):
    """Schema for posting a comment."""

    content: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(BaseModel):
    """A comment as returned by the API."""

    id: int
    proof_id: int
    author_id: int
    nickname: str
    content: str
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
