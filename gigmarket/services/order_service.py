"""Order lifecycle: create, seller status changes, buyer cancel/delete, reads.

Every mutation runs in one unit of work that also writes the
notification describing it. Callers push the returned notifications
only after this module has committed.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import TypedDict
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from gigmarket.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from gigmarket.core.money import parse_amount
from gigmarket.core.order_rules import (
    can_buyer_cancel,
    can_buyer_delete,
    can_seller_transition,
)
from gigmarket.core.structured_logging import build_log_context
from gigmarket.db.enums import NotificationType, OrderStatus, PaymentStatus, Role
from gigmarket.db.models import Notification, Order, Package, Service
from gigmarket.db.unit_of_work import unit_of_work
from gigmarket.schemas.auth import AuthenticatedPrincipal
from gigmarket.services import notification_service, rating_service

logger = logging.getLogger(__name__)


class OrderChangeResult(TypedDict):
    """Result of an order mutation."""

    order: Order
    notifications: list[Notification]


def _load_order(db: Session, order_id: UUID, *, lock: bool = False) -> Order:
    """
    Load an order (with its service) or raise NotFoundError.

    ``lock=True`` reads the row FOR UPDATE and refreshes any copy already
    in the session, so the status seen is the committed one.
    """
    query = (
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.service))
    )
    if lock:
        query = query.with_for_update(of=Order).execution_options(populate_existing=True)
    order = db.execute(query).scalar_one_or_none()
    if not order:
        raise NotFoundError("Order not found")
    return order


def _payload(order: Order, **extra) -> dict:
    data = {"orderId": str(order.id), "serviceId": str(order.service_id)}
    data.update(extra)
    return data


def _log_transition(order: Order, principal: AuthenticatedPrincipal, previous: str) -> None:
    logger.info(
        "Order %s: %s -> %s",
        order.id,
        previous,
        order.status,
        extra=build_log_context(user_id=str(principal.user_id), order_id=str(order.id)),
    )


# =============================================================================
# Reads
# =============================================================================


def list_orders(db: Session, principal: AuthenticatedPrincipal) -> list[Order]:
    """Sellers see orders on their services; buyers see their own. Newest first."""
    query = select(Order).options(
        selectinload(Order.service).selectinload(Service.seller),
        selectinload(Order.package),
    )
    if principal.role == Role.SELLER:
        query = query.join(Service, Order.service_id == Service.id).where(
            Service.user_id == principal.user_id
        )
    else:
        query = query.where(Order.buyer_id == principal.user_id)
    return list(db.execute(query.order_by(Order.created_at.desc())).scalars().all())


def get_order(db: Session, principal: AuthenticatedPrincipal, order_id: UUID) -> Order:
    """
    Get one order with service, package and messages.

    Raises:
        NotFoundError: no such order
        ForbiddenError: caller is neither the buyer nor the service's seller
    """
    order = db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(
            selectinload(Order.service).selectinload(Service.seller),
            selectinload(Order.package),
            selectinload(Order.messages),
        )
    ).scalar_one_or_none()
    if not order:
        raise NotFoundError("Order not found")
    if principal.user_id not in (order.buyer_id, order.service.user_id):
        raise ForbiddenError("Not authorized to view this order")
    return order


# =============================================================================
# Mutations
# =============================================================================


def create_order(
    db: Session,
    principal: AuthenticatedPrincipal,
    service_id: UUID | None,
    package_id: UUID | None,
    total_amount: Decimal | int | float | str | None,
) -> OrderChangeResult:
    """
    Place an order (pending/pending) and notify the seller.

    Raises:
        ValidationError: a field is missing, the amount is not a positive
            number, or the package is not one of the service's packages
        NotFoundError: service does not exist
    """
    if not service_id or not package_id or total_amount is None:
        raise ValidationError("Missing required fields")
    amount = parse_amount(total_amount, "totalAmount")

    with unit_of_work(db):
        service = db.get(Service, service_id)
        if not service:
            raise NotFoundError("Service not found")
        package = db.get(Package, package_id)
        if not package or package.service_id != service.id:
            raise ValidationError("Package does not belong to this service")

        order = Order(
            buyer_id=principal.user_id,
            service_id=service.id,
            package_id=package.id,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            total_amount=amount,
        )
        db.add(order)
        db.flush()

        notification = notification_service.notify(
            db,
            user_id=service.user_id,
            type=NotificationType.ORDER_CREATED,
            message=f"New order received for {service.title}",
            data=_payload(order, packageId=str(package.id)),
        )

    logger.info(
        "Order %s created",
        order.id,
        extra=build_log_context(user_id=str(principal.user_id), order_id=str(order.id)),
    )
    return OrderChangeResult(order=order, notifications=[notification])


def update_order_status(
    db: Session,
    principal: AuthenticatedPrincipal,
    order_id: UUID,
    new_status: str | None,
) -> OrderChangeResult:
    """
    Move an order along the seller chain.

    On ``completed`` also stamps completed_at, bumps the seller's
    completed_gigs by one and re-derives their trophy, in the same
    transaction as the status write.

    Raises:
        NotFoundError: no such order
        ForbiddenError: caller does not own the order's service
        ValidationError: status missing or unknown
        InvalidTransitionError: not a legal move from the current status
    """
    with unit_of_work(db):
        order = _load_order(db, order_id, lock=True)
        service = order.service

        if service.user_id != principal.user_id:
            raise ForbiddenError("Only the seller can update order status")
        if not new_status:
            raise ValidationError("Missing required field: status")
        if not OrderStatus.has_value(new_status):
            raise ValidationError(f"Unknown order status '{new_status}'")
        if not can_seller_transition(order.status, new_status):
            raise InvalidTransitionError(order.status, new_status)

        previous = order.status
        target = OrderStatus(new_status)
        order.status = target.value
        if target == OrderStatus.COMPLETED:
            order.completed_at = datetime.now(timezone.utc)
            profile = rating_service.record_completed_gig(db, service.user_id)
            logger.info(
                "Seller %s completed_gigs=%d trophy=%s",
                service.user_id,
                profile.completed_gigs,
                profile.trophy_level,
            )
        db.flush()

        notification = notification_service.notify(
            db,
            user_id=order.buyer_id,
            type=NotificationType.ORDER_UPDATED,
            message=f"Order status updated to {target.value} for {service.title}",
            data=_payload(order, status=target.value),
        )

    _log_transition(order, principal, previous)
    return OrderChangeResult(order=order, notifications=[notification])


def cancel_order(
    db: Session,
    principal: AuthenticatedPrincipal,
    order_id: UUID,
) -> OrderChangeResult:
    """
    Buyer cancels an order that has not finished.

    The status read, status write and notification share one transaction
    with the order row locked, so a concurrent seller update cannot slip
    in between.

    Raises:
        NotFoundError: no such order
        ForbiddenError: caller is not the buyer
        ConflictError: already cancelled, or completed
        InvalidTransitionError: rejected orders cannot be cancelled
    """
    with unit_of_work(db):
        order = _load_order(db, order_id, lock=True)
        service = order.service

        if order.buyer_id != principal.user_id:
            raise ForbiddenError("Only the buyer can cancel this order")
        if order.status == OrderStatus.CANCELLED.value:
            raise ConflictError("Order is already cancelled")
        if order.status == OrderStatus.COMPLETED.value:
            raise ConflictError("Cannot cancel a completed order")
        if not can_buyer_cancel(order.status):
            raise InvalidTransitionError(order.status, OrderStatus.CANCELLED.value)

        previous = order.status
        order.status = OrderStatus.CANCELLED.value
        db.flush()

        notification = notification_service.notify(
            db,
            user_id=service.user_id,
            type=NotificationType.ORDER_CANCELLED,
            message=f"Order cancelled for {service.title}",
            data=_payload(order, status=OrderStatus.CANCELLED.value),
        )

    _log_transition(order, principal, previous)
    return OrderChangeResult(order=order, notifications=[notification])


def delete_order(
    db: Session,
    principal: AuthenticatedPrincipal,
    order_id: UUID,
) -> None:
    """
    Buyer deletes an order the seller never acted on.

    Paid orders and orders the seller accepted (accepted, in_progress,
    completed) are kept so reviews and seller aggregates stay consistent.

    Raises:
        NotFoundError: no such order
        ForbiddenError: caller is not the buyer
        ConflictError: order is paid or has been actioned by the seller
    """
    with unit_of_work(db):
        order = _load_order(db, order_id, lock=True)
        if order.buyer_id != principal.user_id:
            raise ForbiddenError("Not authorized to delete this order")
        if order.payment_status == PaymentStatus.PAID.value:
            raise ConflictError("Cannot delete a paid order")
        if not can_buyer_delete(order.status):
            raise ConflictError(f"Cannot delete an order that is {order.status}")
        db.delete(order)

    logger.info(
        "Order %s deleted",
        order_id,
        extra=build_log_context(user_id=str(principal.user_id), order_id=str(order_id)),
    )
