"""Centralized defaults for enums."""

from gigmarket.db.enums.orders import OrderStatus, PaymentStatus
from gigmarket.db.enums.profiles import TrophyLevel


DEFAULT_ORDER_STATUS: OrderStatus = OrderStatus.PENDING
DEFAULT_PAYMENT_STATUS: PaymentStatus = PaymentStatus.PENDING
DEFAULT_TROPHY_LEVEL: TrophyLevel = TrophyLevel.NONE
