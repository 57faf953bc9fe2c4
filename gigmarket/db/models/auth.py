"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    String,
    Uuid,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gigmarket.db.base import Base, utc_now
from gigmarket.db.enums import DEFAULT_TROPHY_LEVEL, Role

if TYPE_CHECKING:
    from gigmarket.db.models import Service


class User(Base):
    """
    A marketplace account.

    Identity lives with the auth provider; ``external_id`` is the
    provider's subject claim and is how bearer tokens resolve to a row.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    external_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), default=Role.BUYER.value, server_default=text("'buyer'"), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        default=True, server_default=text("true"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )

    # Relationships
    profile: Mapped["Profile | None"] = relationship(back_populates="user", uselist=False)
    services: Mapped[list["Service"]] = relationship(back_populates="seller")


class Profile(Base):
    """
    Seller aggregate state.

    Denormalized cache of facts derived from reviews and completed orders.
    Written only by rating_service and order_service, never by the user.
    """

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("completed_gigs >= 0", name="ck_profiles_completed_gigs"),
        CheckConstraint("total_reviews >= 0", name="ck_profiles_total_reviews"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    average_rating: Mapped[float] = mapped_column(
        default=0.0, server_default=text("0"), nullable=False
    )
    total_reviews: Mapped[int] = mapped_column(
        default=0, server_default=text("0"), nullable=False
    )
    completed_gigs: Mapped[int] = mapped_column(
        default=0, server_default=text("0"), nullable=False
    )
    trophy_level: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_TROPHY_LEVEL.value,
        server_default=text("'none'"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, server_default=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship(back_populates="profile")
