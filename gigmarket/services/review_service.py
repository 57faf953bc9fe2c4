"""Review create/update/delete. Every write re-derives the seller's rating."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from gigmarket.core.errors import ForbiddenError, NotFoundError, ValidationError
from gigmarket.db.enums import OrderStatus, PaymentStatus
from gigmarket.db.models import Order, Review, Service
from gigmarket.db.unit_of_work import unit_of_work
from gigmarket.schemas.auth import AuthenticatedPrincipal
from gigmarket.services import rating_service

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def _validate_rating(rating: object) -> int:
    # bool is an int subclass; True must not count as a 1-star review
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be a whole number between 1 and 5")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise ValidationError("Rating must be between 1 and 5")
    return rating


def _seller_id_for_service(db: Session, service_id: UUID) -> UUID:
    seller_id = db.execute(
        select(Service.user_id).where(Service.id == service_id)
    ).scalar_one_or_none()
    if seller_id is None:
        raise NotFoundError("Service not found")
    return seller_id


def list_service_reviews(db: Session, service_id: UUID) -> list[Review]:
    """All reviews of a service, newest first."""
    return list(
        db.execute(
            select(Review)
            .where(Review.service_id == service_id)
            .order_by(Review.created_at.desc())
        ).scalars().all()
    )


def get_review(db: Session, review_id: UUID) -> Review:
    """
    Get one review by id.

    Raises:
        NotFoundError: no such review
    """
    review = db.get(Review, review_id)
    if not review:
        raise NotFoundError("Review not found")
    return review


def create_review(
    db: Session,
    principal: AuthenticatedPrincipal,
    service_id: UUID | None,
    order_id: UUID | None,
    rating: int | float | str | None,
    comment: str | None = None,
) -> Review:
    """
    Review a completed, paid order the caller bought.

    Raises:
        ValidationError: missing ids, bad rating, or order already reviewed
        ForbiddenError: order is not the caller's completed+paid order
            for this service
    """
    if not service_id or not order_id:
        raise ValidationError("Missing required fields")
    rating = _validate_rating(rating)

    with unit_of_work(db):
        order = db.execute(
            select(Order).where(
                Order.id == order_id,
                Order.service_id == service_id,
                Order.buyer_id == principal.user_id,
                Order.status == OrderStatus.COMPLETED.value,
                Order.payment_status == PaymentStatus.PAID.value,
            )
        ).scalar_one_or_none()
        if not order:
            raise ForbiddenError(
                "You can only review services you have purchased and paid for"
            )

        existing = db.execute(
            select(Review.id).where(
                Review.user_id == principal.user_id,
                Review.order_id == order.id,
            )
        ).scalar_one_or_none()
        if existing:
            raise ValidationError("You have already reviewed this order")

        review = Review(
            user_id=principal.user_id,
            service_id=order.service_id,
            order_id=order.id,
            rating=rating,
            comment=comment,
        )
        db.add(review)
        db.flush()

        rating_service.recompute_seller_rating(
            db, _seller_id_for_service(db, order.service_id)
        )

    logger.info("Review %s created for order %s", review.id, order.id)
    return review


def update_review(
    db: Session,
    principal: AuthenticatedPrincipal,
    review_id: UUID,
    rating: int | float | str | None = None,
    comment: str | None = None,
) -> Review:
    """
    Change the rating and/or comment of the caller's own review.

    Raises:
        NotFoundError: no such review
        ForbiddenError: review belongs to another user
        ValidationError: bad rating
    """
    with unit_of_work(db):
        review = db.get(Review, review_id)
        if not review:
            raise NotFoundError("Review not found")
        if review.user_id != principal.user_id:
            raise ForbiddenError("Not authorized to update this review")

        if rating is not None:
            review.rating = _validate_rating(rating)
        if comment is not None:
            review.comment = comment
        db.flush()

        rating_service.recompute_seller_rating(
            db, _seller_id_for_service(db, review.service_id)
        )

    return review


def delete_review(
    db: Session,
    principal: AuthenticatedPrincipal,
    review_id: UUID,
) -> None:
    """
    Delete the caller's own review and re-derive the seller's rating.

    Raises:
        NotFoundError: no such review
        ForbiddenError: review belongs to another user
    """
    with unit_of_work(db):
        review = db.get(Review, review_id)
        if not review:
            raise NotFoundError("Review not found")
        if review.user_id != principal.user_id:
            raise ForbiddenError("Not authorized to delete this review")

        seller_id = _seller_id_for_service(db, review.service_id)
        db.delete(review)
        db.flush()
        rating_service.recompute_seller_rating(db, seller_id)

    logger.info("Review %s deleted", review_id)
