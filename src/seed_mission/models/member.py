# src/seed_mission/models/member.py
"""SQLAlchemy models for members and their cleared missions."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seed_mission.db.session import Base
from seed_mission.db.time import utcnow

if TYPE_CHECKING:
    from seed_mission.models.community import Participant


class Member(Base):
    """A registered member, created by the external social-login flow."""

    __tablename__ = "member"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Provider-side identifier; unique across login providers.
    social_id: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    nickname: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    profile_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    exp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_secret: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    login_type: Mapped[str] = mapped_column(String(16), nullable=False, default="kakao")
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    participations: Mapped[list[Participant]] = relationship(
        "Participant",
        back_populates="member",
        cascade="all, delete-orphan",
    )
    clear_missions: Mapped[list[ClearMission]] = relationship(
        "ClearMission",
        back_populates="member",
        cascade="all, delete-orphan",
        order_by="ClearMission.cleared_at",
    )


class ClearMission(Base):
    """A mission unit a member completed; only counted in this service."""

    __tablename__ = "clear_mission"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("member.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    mission_name: Mapped[str] = mapped_column(Text, nullable=False)
    cleared_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    member: Mapped[Member] = relationship("Member", back_populates="clear_missions")
