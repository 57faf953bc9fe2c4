"""SQLAlchemy ORM models, re-exported so every table registers with Base.metadata."""

from gigmarket.db.models.auth import Profile, User
from gigmarket.db.models.notifications import Notification
from gigmarket.db.models.orders import Message, Order, Review, Transaction
from gigmarket.db.models.services import Package, Service

__all__ = [
    "Message",
    "Notification",
    "Order",
    "Package",
    "Profile",
    "Review",
    "Service",
    "Transaction",
    "User",
]
