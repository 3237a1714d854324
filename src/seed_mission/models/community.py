"""SQLAlchemy models for mission communities and their rosters."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seed_mission.db.session import Base
from seed_mission.db.time import utcnow

if TYPE_CHECKING:
    from seed_mission.models.member import Member
    from seed_mission.models.proof import Proof


class Community(Base):
    """A group mission with a participant roster, score target and date window."""

    __tablename__ = "community"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Plain member id: the community outlives its creator's account.
    creator_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    limit_score: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    end_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    participants: Mapped[list[Participant]] = relationship(
        "Participant",
        back_populates="community",
        cascade="all, delete-orphan",
        order_by="Participant.id",
    )
    proofs: Mapped[list[Proof]] = relationship(
        "Proof",
        back_populates="community",
        order_by="Proof.created_at",
    )


class Participant(Base):
    """Membership edge; presence implies the member may post proofs."""

    __tablename__ = "participant"
    __table_args__ = (
        UniqueConstraint("community_id", "member_id", name="uq_participant_community_member"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("community.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("member.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    nickname: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    community: Mapped[Community] = relationship("Community", back_populates="participants")
    member: Mapped[Member] = relationship("Member", back_populates="participations")
