"""Seller aggregate stats (read-only)."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gigmarket.core.deps import get_db
from gigmarket.schemas.review import SellerStats, SellerStatsResponse
from gigmarket.services import rating_service

router = APIRouter()


@router.get("/{seller_id}/stats", response_model=SellerStatsResponse)
def get_seller_stats(seller_id: UUID, db: Session = Depends(get_db)):
    """Average rating, review count, completed gigs and trophy tier."""
    profile = rating_service.get_seller_stats(db, seller_id)
    return SellerStatsResponse(
        stats=SellerStats(
            seller_id=seller_id,
            average_rating=profile.average_rating,
            total_reviews=profile.total_reviews,
            completed_gigs=profile.completed_gigs,
            trophy_level=profile.trophy_level,
        )
    )
