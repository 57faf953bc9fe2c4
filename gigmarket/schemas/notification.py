"""Pydantic schemas for notifications."""

from datetime import datetime
from uuid import UUID

from gigmarket.db.enums import NotificationType
from gigmarket.schemas.base import CamelModel


class NotificationRead(CamelModel):
    """Notification as stored and as pushed over the live channel."""
    id: UUID
    user_id: UUID
    type: NotificationType
    message: str
    data: dict
    read: bool
    created_at: datetime


class NotificationListResponse(CamelModel):
    notifications: list[NotificationRead]
    unread_count: int


class NotificationResponse(CamelModel):
    notification: NotificationRead


class UnreadCountResponse(CamelModel):
    """Unread count only (for polling)."""
    count: int


class MarkAllReadResponse(CamelModel):
    marked_read: int
