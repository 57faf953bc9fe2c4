"""Payment stub endpoint."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gigmarket.core.deps import get_current_principal, get_db
from gigmarket.schemas.auth import AuthenticatedPrincipal
from gigmarket.schemas.payment import PaymentCreate, PaymentRead, PaymentResponse
from gigmarket.services import payment_service

router = APIRouter()


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(
    data: PaymentCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Mark the caller's order paid. Always succeeds for a valid unpaid order."""
    payment, order = payment_service.create_payment(
        db, principal, order_id=data.order_id, amount=data.amount
    )
    return PaymentResponse(
        payment=PaymentRead(
            id=payment.id,
            order_id=order.id,
            amount=payment.amount,
            status=payment.status,
            payment_status=order.payment_status,
            created_at=payment.created_at,
        )
    )
