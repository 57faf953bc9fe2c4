import pytest

from gigmarket.core.trophy_rules import classify
from gigmarket.db.enums import TrophyLevel


@pytest.mark.parametrize(
    "completed_gigs, expected",
    [
        (0, TrophyLevel.NONE),
        (1, TrophyLevel.WOODEN),
        (9, TrophyLevel.WOODEN),
        (10, TrophyLevel.BRONZE),
        (19, TrophyLevel.BRONZE),
        (20, TrophyLevel.SILVER),
        (30, TrophyLevel.GOLD),
        (39, TrophyLevel.GOLD),
        (40, TrophyLevel.PLATINUM),
        (49, TrophyLevel.PLATINUM),
        (50, TrophyLevel.DIAMOND),
        (500, TrophyLevel.DIAMOND),
    ],
)
def test_classify_thresholds_are_inclusive(completed_gigs, expected):
    assert classify(completed_gigs) == expected


def test_classify_negative_is_none():
    assert classify(-3) == TrophyLevel.NONE
