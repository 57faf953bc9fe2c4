"""Seller trophy tiers derived from completed gig count."""

from gigmarket.db.enums import TrophyLevel

# Inclusive lower bounds, highest first. The first match wins.
TROPHY_THRESHOLDS: list[tuple[int, TrophyLevel]] = [
    (50, TrophyLevel.DIAMOND),
    (40, TrophyLevel.PLATINUM),
    (30, TrophyLevel.GOLD),
    (20, TrophyLevel.SILVER),
    (10, TrophyLevel.BRONZE),
    (1, TrophyLevel.WOODEN),
]


def classify(completed_gigs: int) -> TrophyLevel:
    """Map a completed gig count to its trophy tier. Total over all ints."""
    for threshold, level in TROPHY_THRESHOLDS:
        if completed_gigs >= threshold:
            return level
    return TrophyLevel.NONE
