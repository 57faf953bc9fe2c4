"""Seller aggregate state: average rating, review count, completed gigs, trophy."""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from gigmarket.core.errors import NotFoundError
from gigmarket.core.trophy_rules import classify
from gigmarket.db.models import Profile, Review, Service, User

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class SellerRating:
    average_rating: float
    total_reviews: int


def round_rating(total: int, count: int) -> float:
    """Mean of ratings to one decimal place, halves rounded up. 0 when empty."""
    if count <= 0:
        return 0.0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def _insert_for(db: Session):
    """Dialect-specific INSERT so ON CONFLICT is available."""
    if db.get_bind().dialect.name == "postgresql":
        return pg_insert
    return sqlite_insert


def insert_profile_if_missing(db: Session, seller_id: UUID) -> None:
    """
    Create the seller's all-zero profile row unless one already exists.

    ON CONFLICT DO NOTHING on ``profiles.user_id``: when two transactions
    create the first row at once, the loser waits for the winner and then
    inserts nothing instead of failing on the unique constraint.
    """
    stmt = _insert_for(db)(Profile).values(
        id=uuid4(),
        user_id=seller_id,
        average_rating=0.0,
        total_reviews=0,
        completed_gigs=0,
        trophy_level=classify(0).value,
    )
    db.execute(stmt.on_conflict_do_nothing(index_elements=["user_id"]))


def get_or_create_profile(db: Session, seller_id: UUID) -> Profile:
    """
    Load the seller's profile row FOR UPDATE, creating it on first use.

    The lock serializes concurrent recomputes and completed_gigs
    increments for the same seller.
    """
    query = (
        select(Profile)
        .where(Profile.user_id == seller_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    profile = db.execute(query).scalar_one_or_none()
    if profile is None:
        insert_profile_if_missing(db, seller_id)
        profile = db.execute(query).scalar_one()
    return profile


def recompute_seller_rating(db: Session, seller_id: UUID) -> SellerRating:
    """
    Re-derive the seller's rating from every review on every service they own.

    Full rescan rather than a running average, so concurrent recomputes
    converge on the same answer. Runs in the caller's transaction; does
    not commit.
    """
    count, total = db.execute(
        select(func.count(Review.id), func.coalesce(func.sum(Review.rating), 0))
        .join(Service, Review.service_id == Service.id)
        .where(Service.user_id == seller_id)
    ).one()

    rating = SellerRating(
        average_rating=round_rating(int(total), int(count)),
        total_reviews=int(count),
    )

    profile = get_or_create_profile(db, seller_id)
    profile.average_rating = rating.average_rating
    profile.total_reviews = rating.total_reviews
    db.flush()

    logger.info(
        "Seller %s rating recomputed: %.1f over %d review(s)",
        seller_id,
        rating.average_rating,
        rating.total_reviews,
    )
    return rating


def record_completed_gig(db: Session, seller_id: UUID) -> Profile:
    """
    Increment completed_gigs by one and re-derive the trophy tier.

    Runs in the caller's transaction with the profile row locked.
    """
    profile = get_or_create_profile(db, seller_id)
    profile.completed_gigs += 1
    profile.trophy_level = classify(profile.completed_gigs).value
    db.flush()
    return profile


def get_seller_stats(db: Session, seller_id: UUID) -> Profile:
    """
    Read a seller's aggregates.

    Sellers without a profile row yet get an unsaved all-zero profile.

    Raises:
        NotFoundError: no such user
    """
    if db.get(User, seller_id) is None:
        raise NotFoundError("Seller not found")
    profile = db.execute(
        select(Profile).where(Profile.user_id == seller_id)
    ).scalar_one_or_none()
    if profile is None:
        return Profile(
            user_id=seller_id,
            average_rating=0.0,
            total_reviews=0,
            completed_gigs=0,
            trophy_level=classify(0).value,
        )
    return profile
