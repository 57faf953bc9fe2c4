"""Review API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from gigmarket.core.deps import get_current_principal, get_db
from gigmarket.schemas.auth import AuthenticatedPrincipal
from gigmarket.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewRead,
    ReviewResponse,
    ReviewUpdate,
)
from gigmarket.services import review_service

router = APIRouter()


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Review a completed, paid order. Re-derives the seller's rating."""
    review = review_service.create_review(
        db,
        principal,
        service_id=data.service_id,
        order_id=data.order_id,
        rating=data.rating,
        comment=data.comment,
    )
    return ReviewResponse(review=ReviewRead.model_validate(review))


@router.get("/reviews/{review_id}", response_model=ReviewResponse)
def get_review(review_id: UUID, db: Session = Depends(get_db)):
    """Public read of a single review."""
    review = review_service.get_review(db, review_id)
    return ReviewResponse(review=ReviewRead.model_validate(review))


@router.put("/reviews/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: UUID,
    data: ReviewUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Update the caller's own review."""
    review = review_service.update_review(
        db, principal, review_id, rating=data.rating, comment=data.comment
    )
    return ReviewResponse(review=ReviewRead.model_validate(review))


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: UUID,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Delete the caller's own review."""
    review_service.delete_review(db, principal, review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/services/{service_id}/reviews", response_model=ReviewListResponse)
def list_service_reviews(service_id: UUID, db: Session = Depends(get_db)):
    """Public list of a service's reviews, newest first."""
    reviews = review_service.list_service_reviews(db, service_id)
    return ReviewListResponse(reviews=[ReviewRead.model_validate(r) for r in reviews])
