from decimal import Decimal
import uuid

import pytest
from sqlalchemy import select

from gigmarket.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from gigmarket.db.enums import NotificationType, OrderStatus, PaymentStatus, Role, TrophyLevel
from gigmarket.db.models import Message, Notification, Order, Profile, Service
from gigmarket.schemas.auth import AuthenticatedPrincipal
from gigmarket.services import notification_service, order_service


def _principal(user) -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(
        user_id=user.id, email=user.email, role=Role(user.role), name=user.name
    )


def _place_order(db, buyer, service, package, amount="50.00") -> Order:
    result = order_service.create_order(
        db,
        _principal(buyer),
        service_id=service.id,
        package_id=package.id,
        total_amount=Decimal(amount),
    )
    return result["order"]


def _advance(db, seller, order_id, *statuses):
    for status in statuses:
        order_service.update_order_status(db, _principal(seller), order_id, status)


def _notifications_for(db, user_id) -> list[Notification]:
    return list(
        db.execute(select(Notification).where(Notification.user_id == user_id)).scalars()
    )


def _profile(db, seller_id) -> Profile:
    return db.execute(select(Profile).where(Profile.user_id == seller_id)).scalar_one()


# =============================================================================
# Create
# =============================================================================


def test_create_order_starts_pending_and_notifies_seller(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)

    assert order.status == OrderStatus.PENDING.value
    assert order.payment_status == PaymentStatus.PENDING.value
    assert order.total_amount == Decimal("50.00")
    assert order.completed_at is None

    notifications = _notifications_for(db, seller.id)
    assert len(notifications) == 1
    assert notifications[0].type == NotificationType.ORDER_CREATED.value
    assert notifications[0].message == "New order received for Logo Design"
    assert notifications[0].data["orderId"] == str(order.id)
    assert notifications[0].data["serviceId"] == str(service.id)
    assert notifications[0].read is False


def test_create_order_captures_amount_not_live_price(db, buyer, service, package):
    order = _place_order(db, buyer, service, package, amount="75.50")
    package.price = Decimal("999.00")
    db.commit()

    db.refresh(order)
    assert order.total_amount == Decimal("75.50")


@pytest.mark.parametrize("field", ["service_id", "package_id", "total_amount"])
def test_create_order_requires_every_field(db, buyer, service, package, field):
    kwargs = {
        "service_id": service.id,
        "package_id": package.id,
        "total_amount": Decimal("10"),
    }
    kwargs[field] = None

    with pytest.raises(ValidationError, match="Missing required fields"):
        order_service.create_order(db, _principal(buyer), **kwargs)
    assert db.execute(select(Order)).first() is None


def test_create_order_rejects_non_positive_amount(db, buyer, service, package):
    with pytest.raises(ValidationError):
        order_service.create_order(
            db, _principal(buyer), service.id, package.id, Decimal("0")
        )


def test_create_order_unknown_service(db, buyer, package):
    with pytest.raises(NotFoundError):
        order_service.create_order(
            db, _principal(buyer), uuid.uuid4(), package.id, Decimal("10")
        )


def test_create_order_package_must_belong_to_service(db, buyer, seller, service, package):
    other = Service(user_id=seller.id, title="Other")
    db.add(other)
    db.commit()

    with pytest.raises(ValidationError, match="Package does not belong"):
        order_service.create_order(
            db, _principal(buyer), other.id, package.id, Decimal("10")
        )


# =============================================================================
# UpdateStatus
# =============================================================================


def test_seller_walks_the_chain_and_buyer_is_notified(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)

    _advance(db, seller, order.id, "accepted", "in_progress")
    db.refresh(order)
    assert order.status == OrderStatus.IN_PROGRESS.value
    assert order.completed_at is None

    buyer_notes = _notifications_for(db, buyer.id)
    assert [n.type for n in buyer_notes] == [NotificationType.ORDER_UPDATED.value] * 2
    assert {n.data["status"] for n in buyer_notes} == {"accepted", "in_progress"}
    assert "Order status updated to accepted for Logo Design" in {n.message for n in buyer_notes}


def test_completing_sets_completed_at_and_bumps_seller_stats(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)
    _advance(db, seller, order.id, "accepted", "in_progress", "completed")

    db.refresh(order)
    assert order.status == OrderStatus.COMPLETED.value
    assert order.completed_at is not None

    profile = _profile(db, seller.id)
    assert profile.completed_gigs == 1
    assert profile.trophy_level == TrophyLevel.WOODEN.value


def test_complete_twice_is_rejected_and_counts_once(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)
    _advance(db, seller, order.id, "accepted", "in_progress", "completed")

    with pytest.raises(InvalidTransitionError) as exc_info:
        _advance(db, seller, order.id, "completed")

    assert exc_info.value.current == "completed"
    assert exc_info.value.attempted == "completed"
    assert _profile(db, seller.id).completed_gigs == 1


def test_tenth_completed_gig_promotes_wooden_to_bronze(db, buyer, seller, service, package):
    db.add(Profile(user_id=seller.id, completed_gigs=9, trophy_level=TrophyLevel.WOODEN.value))
    db.commit()

    order = _place_order(db, buyer, service, package)
    _advance(db, seller, order.id, "accepted", "in_progress", "completed")

    profile = _profile(db, seller.id)
    assert profile.completed_gigs == 10
    assert profile.trophy_level == TrophyLevel.BRONZE.value


def test_pending_to_completed_is_invalid_transition(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)

    with pytest.raises(InvalidTransitionError) as exc_info:
        _advance(db, seller, order.id, "completed")

    message = str(exc_info.value)
    assert "Current status: pending" in message
    assert "Attempted transition to: completed" in message
    db.refresh(order)
    assert order.status == OrderStatus.PENDING.value
    assert _notifications_for(db, buyer.id) == []


def test_buyer_cannot_update_status(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)

    with pytest.raises(ForbiddenError):
        order_service.update_order_status(db, _principal(buyer), order.id, "completed")


def test_other_seller_cannot_update_status(db, buyer, service, package, make_user):
    order = _place_order(db, buyer, service, package)
    intruder = make_user(Role.SELLER)

    with pytest.raises(ForbiddenError):
        order_service.update_order_status(db, _principal(intruder), order.id, "accepted")


def test_unknown_status_is_validation_error(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)

    with pytest.raises(ValidationError):
        _advance(db, seller, order.id, "shipped")
    with pytest.raises(ValidationError):
        _advance(db, seller, order.id, "")


def test_update_missing_order(db, seller):
    with pytest.raises(NotFoundError):
        order_service.update_order_status(db, _principal(seller), uuid.uuid4(), "accepted")


def test_failure_inside_transaction_leaves_nothing_behind(
    db, buyer, seller, service, package, monkeypatch
):
    order = _place_order(db, buyer, service, package)
    _advance(db, seller, order.id, "accepted", "in_progress")

    def boom(*args, **kwargs):
        raise RuntimeError("storage went away")

    monkeypatch.setattr(notification_service, "notify", boom)

    with pytest.raises(RuntimeError):
        _advance(db, seller, order.id, "completed")

    db.expire_all()
    order = db.get(Order, order.id)
    assert order.status == OrderStatus.IN_PROGRESS.value
    assert order.completed_at is None
    assert db.execute(select(Profile).where(Profile.user_id == seller.id)).scalar_one_or_none() is None


# =============================================================================
# Cancel
# =============================================================================


@pytest.mark.parametrize("path", [(), ("accepted",), ("accepted", "in_progress")])
def test_buyer_can_cancel_unfinished_order(db, buyer, seller, service, package, path):
    order = _place_order(db, buyer, service, package)
    _advance(db, seller, order.id, *path)

    result = order_service.cancel_order(db, _principal(buyer), order.id)

    assert result["order"].status == OrderStatus.CANCELLED.value
    cancelled = [
        n for n in _notifications_for(db, seller.id)
        if n.type == NotificationType.ORDER_CANCELLED.value
    ]
    assert len(cancelled) == 1
    assert cancelled[0].message == "Order cancelled for Logo Design"
    assert result["notifications"] == cancelled


def test_cancel_twice_is_conflict(db, buyer, service, package):
    order = _place_order(db, buyer, service, package)
    order_service.cancel_order(db, _principal(buyer), order.id)

    with pytest.raises(ConflictError, match="already cancelled"):
        order_service.cancel_order(db, _principal(buyer), order.id)


def test_cancel_completed_is_conflict(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)
    _advance(db, seller, order.id, "accepted", "in_progress", "completed")

    with pytest.raises(ConflictError, match="completed"):
        order_service.cancel_order(db, _principal(buyer), order.id)


def test_cancel_rejected_is_invalid_transition(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)
    _advance(db, seller, order.id, "rejected")

    with pytest.raises(InvalidTransitionError):
        order_service.cancel_order(db, _principal(buyer), order.id)


def test_seller_cannot_cancel(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)

    with pytest.raises(ForbiddenError):
        order_service.cancel_order(db, _principal(seller), order.id)


def test_seller_update_after_cancel_is_rejected(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)
    order_service.cancel_order(db, _principal(buyer), order.id)

    with pytest.raises(InvalidTransitionError):
        _advance(db, seller, order.id, "accepted")


# =============================================================================
# Delete / read
# =============================================================================


def test_buyer_deletes_pending_order(db, buyer, service, package):
    order = _place_order(db, buyer, service, package)
    order_service.delete_order(db, _principal(buyer), order.id)
    assert db.get(Order, order.id) is None


def test_delete_refused_once_seller_accepted(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)
    _advance(db, seller, order.id, "accepted")

    with pytest.raises(ConflictError):
        order_service.delete_order(db, _principal(buyer), order.id)


def test_delete_refused_when_paid(db, buyer, service, package):
    order = _place_order(db, buyer, service, package)
    order.payment_status = PaymentStatus.PAID.value
    db.commit()

    with pytest.raises(ConflictError, match="paid"):
        order_service.delete_order(db, _principal(buyer), order.id)


def test_only_buyer_can_delete(db, buyer, seller, service, package):
    order = _place_order(db, buyer, service, package)

    with pytest.raises(ForbiddenError):
        order_service.delete_order(db, _principal(seller), order.id)


def test_get_order_visible_to_buyer_and_seller_only(db, buyer, seller, service, package, make_user):
    order = _place_order(db, buyer, service, package)
    db.add(Message(order_id=order.id, user_id=buyer.id, content="Hi!"))
    db.commit()

    for user in (buyer, seller):
        loaded = order_service.get_order(db, _principal(user), order.id)
        assert [m.content for m in loaded.messages] == ["Hi!"]

    stranger = make_user(Role.BUYER)
    with pytest.raises(ForbiddenError):
        order_service.get_order(db, _principal(stranger), order.id)
    with pytest.raises(NotFoundError):
        order_service.get_order(db, _principal(buyer), uuid.uuid4())


def test_list_orders_by_role(db, buyer, seller, service, package, make_user):
    mine = _place_order(db, buyer, service, package)
    other_buyer = make_user(Role.BUYER)
    theirs = _place_order(db, other_buyer, service, package)

    assert [o.id for o in order_service.list_orders(db, _principal(buyer))] == [mine.id]
    seller_view = {o.id for o in order_service.list_orders(db, _principal(seller))}
    assert seller_view == {mine.id, theirs.id}
