"""Enum definitions for application constants."""

from gigmarket.db.enums.auth import Role
from gigmarket.db.enums.defaults import (
    DEFAULT_ORDER_STATUS,
    DEFAULT_PAYMENT_STATUS,
    DEFAULT_TROPHY_LEVEL,
)
from gigmarket.db.enums.notifications import NotificationType
from gigmarket.db.enums.orders import OrderStatus, PaymentStatus, TransactionStatus
from gigmarket.db.enums.profiles import TrophyLevel

__all__ = [
    "DEFAULT_ORDER_STATUS",
    "DEFAULT_PAYMENT_STATUS",
    "DEFAULT_TROPHY_LEVEL",
    "NotificationType",
    "OrderStatus",
    "PaymentStatus",
    "Role",
    "TransactionStatus",
    "TrophyLevel",
]
