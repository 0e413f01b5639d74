"""Customer reviews."""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from tableside.core.errors import NotFound, ValidationFailed
from tableside.core.validators import is_valid_table_code
from tableside.models.orders import MealBooking
from tableside.models.review import Review

logger = logging.getLogger(__name__)


def create_review(db: Session, data: dict) -> Review:
    """Store a review. A review of a booking is attributed to that booking's customer."""
    data = dict(data)
    booking_id = data.get("booking_id")
    if booking_id is not None:
        booking = db.query(MealBooking).filter(MealBooking.id == booking_id).first()
        if not booking:
            raise NotFound("Booking", booking_id)
        data["user_id"] = booking.user_id
    elif data.get("user_id") is not None and not is_valid_table_code(data["user_id"]):
        raise ValidationFailed(f"Invalid table code: {data['user_id']!r}")
    review = Review(**data)
    db.add(review)
    db.commit()
    db.refresh(review)
    logger.info(f"Review {review.id} received: {review.rating} stars")
    return review


def list_reviews(db: Session, rating: Optional[int] = None, user_id: Optional[str] = None) -> List[Review]:
    query = db.query(Review)
    if rating is not None:
        query = query.filter(Review.rating == rating)
    if user_id:
        query = query.filter(Review.user_id == user_id)
    return query.order_by(Review.created_at.desc(), Review.id.desc()).all()


def get_review(db: Session, review_id: int) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFound("Review", review_id)
    return review


def delete_review(db: Session, review_id: int) -> None:
    review = get_review(db, review_id)
    db.delete(review)
    db.commit()


def average_rating(db: Session) -> float:
    value = db.query(func.avg(Review.rating)).scalar()
    return round(float(value), 1) if value is not None else 0.0


def review_stats(db: Session) -> dict:
    rows = db.query(Review.rating, func.count(Review.id)).group_by(Review.rating).all()
    distribution = {stars: 0 for stars in range(1, 6)}
    for stars, count in rows:
        distribution[int(stars)] = count
    return {
        "total_reviews": sum(distribution.values()),
        "average_rating": average_rating(db),
        "distribution": distribution,
    }
