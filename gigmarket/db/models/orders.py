"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gigmarket.db.base import Base, utc_now
from gigmarket.db.enums import DEFAULT_ORDER_STATUS, DEFAULT_PAYMENT_STATUS, TransactionStatus

if TYPE_CHECKING:
    from gigmarket.db.models import Package, Service, User


class Order(Base):
    """
    One buyer's purchase of one Package.

    ``total_amount`` is captured at creation and never re-read from the
    package. ``completed_at`` is set exactly when status is completed.
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index("idx_orders_buyer", "buyer_id", "created_at"),
        Index("idx_orders_service", "service_id", "created_at"),
        CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)",
            name="ck_orders_completed_at",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    buyer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    service_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("services.id", ondelete="CASCADE"), nullable=False
    )
    package_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("packages.id", ondelete="RESTRICT"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_ORDER_STATUS.value,
        server_default=text("'pending'"),
        nullable=False,
    )
    payment_status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_PAYMENT_STATUS.value,
        server_default=text("'pending'"),
        nullable=False,
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, server_default=func.now(), nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    buyer: Mapped["User"] = relationship()
    service: Mapped["Service"] = relationship()
    package: Mapped["Package"] = relationship()
    messages: Mapped[list["Message"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )
    reviews: Mapped[list["Review"]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )
    transactions: Mapped[list["Transaction"]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )


class Review(Base):
    """A buyer's 1-5 rating of a completed, paid order."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "order_id", name="uq_reviews_user_order"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating"),
        Index("idx_reviews_service", "service_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    service_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("services.id", ondelete="CASCADE"), nullable=False
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    rating: Mapped[int] = mapped_column(nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship()
    service: Mapped["Service"] = relationship(back_populates="reviews")
    order: Mapped["Order"] = relationship(back_populates="reviews")


class Message(Base):
    """
    Chat message attached to an order.

    Written by the chat transport; the order endpoints only read it.
    """

    __tablename__ = "messages"
    __table_args__ = (Index("idx_messages_order", "order_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )

    order: Mapped["Order"] = relationship(back_populates="messages")
    user: Mapped["User"] = relationship()


class Transaction(Base):
    """Payment record written by the payment stub."""

    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=TransactionStatus.PENDING.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )

    order: Mapped["Order"] = relationship(back_populates="transactions")
