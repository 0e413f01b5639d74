"""Customer review routes."""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from tableside.core.rate_limit import limiter
from tableside.core.rbac import RequireManager, RequireStaff
from tableside.core.validators import PositiveIntId
from tableside.db.session import DbSession
from tableside.schemas.review import ReviewCreate, ReviewResponse, ReviewStats
from tableside.services import review_service

router = APIRouter()


@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
def create_review(request: Request, data: ReviewCreate, db: DbSession):
    return review_service.create_review(db, data.model_dump())


@router.get("/", response_model=List[ReviewResponse])
def list_reviews(
    db: DbSession,
    current_user: RequireStaff,
    rating: Optional[int] = Query(None, ge=1, le=5),
    user_id: Optional[str] = Query(None, max_length=20),
):
    """Newest first, optionally only one star rating or one customer."""
    return review_service.list_reviews(db, rating=rating, user_id=user_id)


@router.get("/stats", response_model=ReviewStats)
def review_stats(db: DbSession, current_user: RequireStaff):
    return review_service.review_stats(db)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(review_id: PositiveIntId, db: DbSession, current_user: RequireManager):
    review_service.delete_review(db, review_id)
