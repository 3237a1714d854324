# src/seed_mission/models/proof.py
"""SQLAlchemy models for proof posts and the collections they own."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seed_mission.db.session import Base
from seed_mission.db.time import utcnow

if TYPE_CHECKING:
    from seed_mission.models.community import Community


class Proof(Base):
    """A member's post evidencing completion of a community mission.

    The proof is the aggregate root for its images, comments and hearts:
    those rows are created through it and removed with it.
    """

    __tablename__ = "proof"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("community.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Set once at creation; edits never reassign the author.
    author_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    nickname: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )

    community: Mapped[Community] = relationship("Community", back_populates="proofs")
    images: Mapped[list[Image]] = relationship(
        "Image",
        back_populates="proof",
        cascade="all, delete-orphan",
        order_by="Image.id",
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="proof",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )
    hearts: Mapped[list[Heart]] = relationship(
        "Heart",
        back_populates="proof",
        cascade="all, delete-orphan",
        order_by="Heart.id",
    )

    def is_written_by(self, member_id: int | None) -> bool:
        """Return True when `member_id` authored this proof."""
        return member_id is not None and self.author_id == member_id


class Image(Base):
    """An uploaded image attached to a proof."""

    __tablename__ = "image"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    proof_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("proof.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    proof: Mapped[Proof] = relationship("Proof", back_populates="images")


class Comment(Base):
    """A comment left on a proof."""

    __tablename__ = "comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    proof_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("proof.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    nickname: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    proof: Mapped[Proof] = relationship("Proof", back_populates="comments")


class Heart(Base):
    """A like relation between a member and a proof.

    The unique constraint on (proof_id, member_id) keeps at most one heart
    per member per proof even when toggles race.
    """

    __tablename__ = "heart"
    __table_args__ = (
        UniqueConstraint("proof_id", "member_id", name="uq_heart_proof_member"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    proof_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("proof.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    proof: Mapped[Proof] = relationship("Proof", back_populates="hearts")
