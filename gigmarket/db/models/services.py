"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gigmarket.db.base import Base, utc_now

if TYPE_CHECKING:
    from gigmarket.db.models import Review, User


class Service(Base):
    """A seller's listing. The seller is ``user_id``."""

    __tablename__ = "services"
    __table_args__ = (Index("idx_services_user", "user_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )

    # Relationships
    seller: Mapped["User"] = relationship(back_populates="services")
    packages: Mapped[list["Package"]] = relationship(
        back_populates="service", cascade="all, delete-orphan"
    )
    reviews: Mapped[list["Review"]] = relationship(back_populates="service")


class Package(Base):
    """
    A priced tier of a Service.

    Orders capture their own total_amount, so later price edits never
    change what an existing order bills.
    """

    __tablename__ = "packages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    service_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("services.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    delivery_time: Mapped[int] = mapped_column(nullable=False)  # days
    features: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    service: Mapped["Service"] = relationship(back_populates="packages")
