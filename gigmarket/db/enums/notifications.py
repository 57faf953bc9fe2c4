"""Notification-related enums."""

from enum import Enum


class NotificationType(str, Enum):
    """Types of in-app notifications."""

    ORDER_CREATED = "order_created"  # To seller, new order placed
    ORDER_UPDATED = "order_updated"  # To buyer, seller moved the order
    ORDER_CANCELLED = "order_cancelled"  # To seller, buyer cancelled
    ORDER_COMPLETED = "order_completed"
