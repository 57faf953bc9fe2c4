"""Pydantic schemas for reviews and seller stats."""

from datetime import datetime
from uuid import UUID

from gigmarket.db.enums import TrophyLevel
from gigmarket.schemas.base import CamelModel, RawNumber


class ReviewCreate(CamelModel):
    """Request to review a completed, paid order. Checked by review_service."""
    service_id: UUID | None = None
    order_id: UUID | None = None
    rating: RawNumber = None
    comment: str | None = None


class ReviewUpdate(CamelModel):
    rating: RawNumber = None
    comment: str | None = None


class ReviewRead(CamelModel):
    id: UUID
    user_id: UUID
    service_id: UUID
    order_id: UUID
    rating: int
    comment: str | None
    created_at: datetime
    updated_at: datetime


class ReviewResponse(CamelModel):
    review: ReviewRead


class ReviewListResponse(CamelModel):
    reviews: list[ReviewRead]


class SellerStats(CamelModel):
    """Derived seller aggregates. Read-only."""
    seller_id: UUID
    average_rating: float
    total_reviews: int
    completed_gigs: int
    trophy_level: TrophyLevel


class SellerStatsResponse(CamelModel):
    stats: SellerStats
