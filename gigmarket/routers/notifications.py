"""
Notifications Router - /notifications endpoints.

Pull/ack surface for the rows the order lifecycle writes.
"""

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from gigmarket.core.deps import get_current_principal, get_db, get_presence
from gigmarket.core.websocket import PresenceRegistry
from gigmarket.schemas.auth import AuthenticatedPrincipal
from gigmarket.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationRead,
    NotificationResponse,
    UnreadCountResponse,
)
from gigmarket.services import notification_service


router = APIRouter()


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    unread_only: bool = Query(False),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Get user's notifications, newest first."""
    notifications = notification_service.get_notifications(
        db=db,
        user_id=principal.user_id,
        unread_only=unread_only,
    )
    unread_count = notification_service.get_unread_count(db=db, user_id=principal.user_id)
    return NotificationListResponse(
        notifications=[NotificationRead.model_validate(n) for n in notifications],
        unread_count=unread_count,
    )


@router.get("/count", response_model=UnreadCountResponse)
def get_unread_count(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Get unread notification count (for polling)."""
    count = notification_service.get_unread_count(db=db, user_id=principal.user_id)
    return UnreadCountResponse(count=count)


@router.post("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Mark all notifications as read."""
    count = notification_service.mark_all_read(db=db, user_id=principal.user_id)
    return MarkAllReadResponse(marked_read=count)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: UUID,
    background_tasks: BackgroundTasks,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    presence: PresenceRegistry = Depends(get_presence),
    db: Session = Depends(get_db),
):
    """Mark a notification as read and sync the user's other sessions."""
    notification = notification_service.mark_read(
        db=db,
        user_id=principal.user_id,
        notification_id=notification_id,
    )
    background_tasks.add_task(
        notification_service.push_notifications,
        presence,
        [notification],
        notification_service.EVENT_NOTIFICATION_UPDATED,
    )
    return NotificationResponse(notification=NotificationRead.model_validate(notification))
