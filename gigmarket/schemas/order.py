"""Pydantic schemas for orders."""

from datetime import datetime
from uuid import UUID

from gigmarket.db.enums import OrderStatus, PaymentStatus
from gigmarket.schemas.base import CamelModel, RawNumber


class OrderCreate(CamelModel):
    """
    Request to place an order.

    Fields are optional and loosely typed so that a missing or malformed
    value reaches the service and comes back as a 400 validation_error
    rather than a 422.
    """
    service_id: UUID | None = None
    package_id: UUID | None = None
    total_amount: RawNumber = None


class OrderStatusUpdate(CamelModel):
    """Request to move an order along the seller chain."""
    status: str | None = None


class PackageRead(CamelModel):
    id: UUID
    name: str
    description: str | None
    price: float
    delivery_time: int
    features: list


class SellerSummary(CamelModel):
    id: UUID
    name: str | None
    email: str


class ServiceSummary(CamelModel):
    id: UUID
    title: str
    description: str | None
    seller: SellerSummary


class MessageRead(CamelModel):
    id: UUID
    user_id: UUID
    content: str
    created_at: datetime


class OrderRead(CamelModel):
    """Order as returned by list/create/status endpoints."""
    id: UUID
    buyer_id: UUID
    service_id: UUID
    package_id: UUID
    status: OrderStatus
    payment_status: PaymentStatus
    total_amount: float
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None
    service: ServiceSummary
    package: PackageRead


class OrderDetail(OrderRead):
    """Order with its chat messages (GET /orders/{id})."""
    messages: list[MessageRead] = []


class OrderResponse(CamelModel):
    order: OrderRead


class OrderDetailResponse(CamelModel):
    order: OrderDetail


class OrderListResponse(CamelModel):
    orders: list[OrderRead]
