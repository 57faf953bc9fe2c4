"""Seller profile enums."""

from enum import Enum


class TrophyLevel(str, Enum):
    """Seller achievement tier, derived from completed gig count."""

    NONE = "none"
    WOODEN = "wooden"
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"
