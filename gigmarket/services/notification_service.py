"""
Notification Service - durable in-app notifications plus live push.

Rows are written inside the caller's unit of work by ``notify``; the
caller pushes them with ``push_notifications`` only after commit, so a
client never hears about an order change that was rolled back.
"""

import logging
from uuid import UUID

import anyio
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from gigmarket.core.config import settings
from gigmarket.core.errors import ForbiddenError, NotFoundError
from gigmarket.core.structured_logging import build_log_context
from gigmarket.core.websocket import PresenceRegistry
from gigmarket.db.enums import NotificationType
from gigmarket.db.models import Notification
from gigmarket.db.unit_of_work import unit_of_work
from gigmarket.schemas.notification import NotificationRead

logger = logging.getLogger(__name__)

EVENT_NOTIFICATION = "notification"
EVENT_NOTIFICATION_UPDATED = "notification_updated"


# =============================================================================
# Notification CRUD
# =============================================================================


def notify(
    db: Session,
    user_id: UUID,
    type: NotificationType,
    message: str,
    data: dict,
) -> Notification:
    """
    Record a notification in the current transaction.

    Does not commit; the row becomes durable with the caller's unit of work.
    """
    notification = Notification(
        user_id=user_id,
        type=type.value,
        message=message,
        data=data,
        read=False,
    )
    db.add(notification)
    db.flush()
    return notification


def get_notifications(
    db: Session,
    user_id: UUID,
    unread_only: bool = False,
) -> list[Notification]:
    """Get notifications for user, newest first."""
    query = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        query = query.where(Notification.read.is_(False))
    query = query.order_by(Notification.created_at.desc())
    return list(db.execute(query).scalars().all())


def get_unread_count(db: Session, user_id: UUID) -> int:
    """Get count of unread notifications."""
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read.is_(False),
    ).count()


def mark_read(db: Session, user_id: UUID, notification_id: UUID) -> Notification:
    """
    Mark one notification as read.

    Raises:
        NotFoundError: no such notification
        ForbiddenError: notification belongs to another user
    """
    with unit_of_work(db):
        notification = db.get(Notification, notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise ForbiddenError("Not authorized to update this notification")
        notification.read = True
    return notification


def mark_all_read(db: Session, user_id: UUID) -> int:
    """Mark all of a user's unread notifications as read. Idempotent."""
    with unit_of_work(db):
        result = db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session="fetch")
        )
    return result.rowcount or 0


# =============================================================================
# Live push
# =============================================================================


def serialize(notification: Notification) -> dict:
    """JSON-safe wire form, identical to the pull endpoint's item shape."""
    return NotificationRead.model_validate(notification).model_dump(
        mode="json", by_alias=True
    )


async def push_notifications(
    presence: PresenceRegistry,
    notifications: list[Notification],
    event: str = EVENT_NOTIFICATION,
) -> None:
    """
    Best-effort push of already-committed notifications.

    Never raises: the stored row already satisfies delivery, and the
    client can always pull it from GET /notifications.
    """
    for notification in notifications:
        try:
            payload = {"type": event, "data": serialize(notification)}
            with anyio.fail_after(settings.NOTIFICATION_PUSH_TIMEOUT_SECONDS):
                delivered = await presence.send_to_user(notification.user_id, payload)
        except Exception:
            logger.warning(
                "Notification push failed",
                exc_info=True,
                extra=build_log_context(user_id=str(notification.user_id)),
            )
            continue
        logger.debug(
            "Pushed %s %s to %d session(s)",
            event,
            notification.id,
            delivered,
            extra=build_log_context(user_id=str(notification.user_id)),
        )
