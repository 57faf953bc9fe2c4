"""Order-related enums."""

from enum import Enum


class OrderStatus(str, Enum):
    """
    Order lifecycle status.

    Seller-driven chain:
        pending → accepted → in_progress → completed
        pending → rejected

    Buyer-driven:
        pending | accepted | in_progress → cancelled
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_

    @classmethod
    def terminal(cls) -> set["OrderStatus"]:
        """Statuses with no outbound transitions."""
        return {cls.REJECTED, cls.CANCELLED, cls.COMPLETED}


class PaymentStatus(str, Enum):
    """Order payment status."""

    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class TransactionStatus(str, Enum):
    """Payment stub transaction status."""

    PENDING = "pending"
    COMPLETED = "completed"
