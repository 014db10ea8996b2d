"""
SQLAlchemy models for HoopsPicks.
"""
from __future__ import annotations

import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Membership(str, enum.Enum):
    FREE = "free"
    PRO = "pro"


class Profile(Base):
    __tablename__ = "profiles"

    user_id = Column(Text, primary_key=True, nullable=False)
    membership = Column(
        Enum(Membership, name="membership", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Membership.FREE,
        server_default=Membership.FREE.value,
    )
    # One profile per Stripe customer; webhook updates are keyed on it.
    stripe_customer_id = Column(Text, unique=True, index=True)
    stripe_subscription_id = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class NbaPick(Base):
    """AI-generated spread pick for one game."""

    __tablename__ = "nba_picks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    game_id = Column(Text, nullable=False)
    spread_pick = Column(Text, nullable=False)
    explanation = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class UserPick(Base):
    """A community member's pick; result is win, loss, push or unset."""

    __tablename__ = "user_picks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, ForeignKey("profiles.user_id"), nullable=False, index=True)
    game_id = Column(Text, nullable=False)
    pick = Column(Text, nullable=False)
    result = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


__all__ = ["Base", "Membership", "Profile", "NbaPick", "UserPick"]
