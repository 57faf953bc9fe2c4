from decimal import Decimal
import uuid

import pytest
from sqlalchemy import select

from gigmarket.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from gigmarket.db.enums import PaymentStatus, Role, TransactionStatus
from gigmarket.db.models import Transaction
from gigmarket.schemas.auth import AuthenticatedPrincipal
from gigmarket.services import order_service, payment_service


def _principal(user) -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(
        user_id=user.id, email=user.email, role=Role(user.role), name=user.name
    )


def _place_order(db, buyer, service, package):
    return order_service.create_order(
        db, _principal(buyer), service.id, package.id, Decimal("50.00")
    )["order"]


def test_payment_marks_order_paid(db, buyer, service, package):
    order = _place_order(db, buyer, service, package)

    payment, paid_order = payment_service.create_payment(
        db, _principal(buyer), order.id, Decimal("50.00")
    )

    assert payment.status == TransactionStatus.COMPLETED.value
    assert payment.amount == Decimal("50.00")
    assert paid_order.payment_status == PaymentStatus.PAID.value
    transactions = db.execute(select(Transaction).where(Transaction.order_id == order.id)).scalars()
    assert len(list(transactions)) == 1


def test_payment_does_not_change_order_status(db, buyer, service, package):
    order = _place_order(db, buyer, service, package)
    _, paid_order = payment_service.create_payment(db, _principal(buyer), order.id, Decimal("5"))
    assert paid_order.status == "pending"


def test_double_payment_conflicts(db, buyer, service, package):
    order = _place_order(db, buyer, service, package)
    payment_service.create_payment(db, _principal(buyer), order.id, Decimal("50.00"))

    with pytest.raises(ConflictError, match="already paid"):
        payment_service.create_payment(db, _principal(buyer), order.id, Decimal("50.00"))


def test_payment_by_other_user_forbidden(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)
    with pytest.raises(ForbiddenError):
        payment_service.create_payment(db, _principal(seller), order.id, Decimal("50.00"))


@pytest.mark.parametrize("amount", [None, Decimal("0"), Decimal("-1"), "abc"])
def test_payment_amount_validation(db, buyer, amount):
    with pytest.raises(ValidationError):
        payment_service.create_payment(db, _principal(buyer), uuid.uuid4(), amount)


def test_payment_unknown_order(db, buyer):
    with pytest.raises(NotFoundError):
        payment_service.create_payment(db, _principal(buyer), uuid.uuid4(), Decimal("1"))


@pytest.mark.asyncio
async def test_payment_endpoint_validation(client, buyer, auth_headers):
    response = await client.post("/payments", json={"amount": 10}, headers=auth_headers(buyer))
    assert response.status_code == 400
    assert response.json() == {
        "error": "validation_error",
        "detail": "Amount and orderId are required",
    }
