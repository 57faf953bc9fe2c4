"""Pydantic schemas for the payment stub."""

from datetime import datetime
from uuid import UUID

from gigmarket.db.enums import PaymentStatus, TransactionStatus
from gigmarket.schemas.base import CamelModel, RawNumber


class PaymentCreate(CamelModel):
    order_id: UUID | None = None
    amount: RawNumber = None


class PaymentRead(CamelModel):
    id: UUID
    order_id: UUID
    amount: float
    status: TransactionStatus
    payment_status: PaymentStatus
    created_at: datetime


class PaymentResponse(CamelModel):
    payment: PaymentRead
