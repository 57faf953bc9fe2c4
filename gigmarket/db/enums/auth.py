"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    Marketplace roles.

    - BUYER: places orders and reviews completed ones
    - SELLER: owns services and drives order status
    """

    BUYER = "buyer"
    SELLER = "seller"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_
