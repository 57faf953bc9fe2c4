"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gigmarket.db.base import Base, utc_now

if TYPE_CHECKING:
    from gigmarket.db.models import User


class Notification(Base):
    """
    In-app notifications for users.

    Written in the same transaction as the order event it describes;
    the live push is best effort, this row is the durable copy.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notif_user_unread", "user_id", "read", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Notification type (enum)
    type: Mapped[str] = mapped_column(String(50), nullable=False)

    message: Mapped[str] = mapped_column(Text, nullable=False)

    # Opaque payload, always carries orderId and serviceId
    data: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    read: Mapped[bool] = mapped_column(
        default=False, server_default=text("false"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship()
