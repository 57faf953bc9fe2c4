"""Order status transition rules by actor."""

from gigmarket.db.enums import OrderStatus

# Seller-driven chain. Anything absent from a key's list is illegal.
SELLER_TRANSITIONS: dict[OrderStatus, list[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.ACCEPTED, OrderStatus.REJECTED],
    OrderStatus.ACCEPTED: [OrderStatus.IN_PROGRESS],
    OrderStatus.IN_PROGRESS: [OrderStatus.COMPLETED],
}

# Buyer cancel is a separate operation, not part of the chain above.
BUYER_CANCELLABLE: frozenset[OrderStatus] = frozenset(
    {OrderStatus.PENDING, OrderStatus.ACCEPTED, OrderStatus.IN_PROGRESS}
)

# Statuses a buyer may still delete from, as long as the order is unpaid.
BUYER_DELETABLE: frozenset[OrderStatus] = frozenset(
    {OrderStatus.PENDING, OrderStatus.REJECTED, OrderStatus.CANCELLED}
)


def _coerce(status: OrderStatus | str) -> OrderStatus | None:
    try:
        return OrderStatus(status)
    except ValueError:
        return None


def can_seller_transition(current: OrderStatus | str, target: OrderStatus | str) -> bool:
    """Return True when the seller may move an order from current to target."""
    current_status, target_status = _coerce(current), _coerce(target)
    if current_status is None or target_status is None:
        return False
    return target_status in SELLER_TRANSITIONS.get(current_status, [])


def can_buyer_cancel(current: OrderStatus | str) -> bool:
    return _coerce(current) in BUYER_CANCELLABLE


def can_buyer_delete(current: OrderStatus | str) -> bool:
    return _coerce(current) in BUYER_DELETABLE
