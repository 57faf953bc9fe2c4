"""Payment stub: records a transaction and marks the order paid. No gateway."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from gigmarket.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from gigmarket.core.money import parse_amount
from gigmarket.db.enums import PaymentStatus, TransactionStatus
from gigmarket.db.models import Order, Transaction
from gigmarket.db.unit_of_work import unit_of_work
from gigmarket.schemas.auth import AuthenticatedPrincipal

logger = logging.getLogger(__name__)


def create_payment(
    db: Session,
    principal: AuthenticatedPrincipal,
    order_id: UUID | None,
    amount: Decimal | int | float | str | None,
) -> tuple[Transaction, Order]:
    """
    Record a payment for the caller's order and mark it paid.

    Raises:
        ValidationError: order id or amount missing, or amount not a positive number
        NotFoundError: no such order
        ForbiddenError: caller is not the buyer
        ConflictError: order already paid
    """
    if not order_id or amount is None:
        raise ValidationError("Amount and orderId are required")
    value = parse_amount(amount, "Amount")

    with unit_of_work(db):
        order = db.execute(
            select(Order)
            .where(Order.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not order:
            raise NotFoundError("Order not found")
        if order.buyer_id != principal.user_id:
            raise ForbiddenError("Only the buyer can pay for this order")
        if order.payment_status == PaymentStatus.PAID.value:
            raise ConflictError("Order is already paid")

        payment = Transaction(
            order_id=order.id,
            amount=value,
            status=TransactionStatus.COMPLETED.value,
        )
        db.add(payment)
        order.payment_status = PaymentStatus.PAID.value
        db.flush()

    logger.info("Order %s marked paid (stub transaction %s)", order.id, payment.id)
    return payment, order
