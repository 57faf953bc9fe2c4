"""Order lifecycle API endpoints."""

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.orm import Session

from gigmarket.core.deps import get_current_principal, get_db, get_presence
from gigmarket.core.websocket import PresenceRegistry
from gigmarket.schemas.auth import AuthenticatedPrincipal
from gigmarket.schemas.order import (
    OrderCreate,
    OrderDetail,
    OrderDetailResponse,
    OrderListResponse,
    OrderRead,
    OrderResponse,
    OrderStatusUpdate,
)
from gigmarket.services import notification_service, order_service

router = APIRouter()


def _push(
    background_tasks: BackgroundTasks,
    presence: PresenceRegistry,
    result: order_service.OrderChangeResult,
) -> None:
    """Schedule the live push to run after the response is sent."""
    background_tasks.add_task(
        notification_service.push_notifications,
        presence,
        result["notifications"],
    )


@router.get("", response_model=OrderListResponse)
def list_orders(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """List the caller's orders (as buyer, or as seller of the service)."""
    orders = order_service.list_orders(db, principal)
    return OrderListResponse(orders=[OrderRead.model_validate(o) for o in orders])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    data: OrderCreate,
    background_tasks: BackgroundTasks,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    presence: PresenceRegistry = Depends(get_presence),
    db: Session = Depends(get_db),
):
    """Place an order. The seller is notified."""
    result = order_service.create_order(
        db,
        principal,
        service_id=data.service_id,
        package_id=data.package_id,
        total_amount=data.total_amount,
    )
    _push(background_tasks, presence, result)
    return OrderResponse(order=OrderRead.model_validate(result["order"]))


@router.get("/{order_id}", response_model=OrderDetailResponse)
def get_order(
    order_id: UUID,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Get an order with its service, package and messages."""
    order = order_service.get_order(db, principal, order_id)
    return OrderDetailResponse(order=OrderDetail.model_validate(order))


@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    presence: PresenceRegistry = Depends(get_presence),
    db: Session = Depends(get_db),
):
    """Seller moves the order along pending → accepted → in_progress → completed."""
    result = order_service.update_order_status(db, principal, order_id, data.status)
    _push(background_tasks, presence, result)
    return OrderResponse(order=OrderRead.model_validate(result["order"]))


@router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: UUID,
    background_tasks: BackgroundTasks,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    presence: PresenceRegistry = Depends(get_presence),
    db: Session = Depends(get_db),
):
    """Buyer cancels an unfinished order. The seller is notified."""
    result = order_service.cancel_order(db, principal, order_id)
    _push(background_tasks, presence, result)
    return OrderResponse(order=OrderRead.model_validate(result["order"]))


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: UUID,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Buyer deletes an unpaid order the seller never acted on."""
    order_service.delete_order(db, principal, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
