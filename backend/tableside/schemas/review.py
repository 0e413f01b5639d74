"""Review schemas."""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    rating: int = Field(..., ge=1, le=5)
    review_text: Optional[str] = Field(None, max_length=2000)
    booking_id: Optional[int] = Field(None, gt=0)
    user_id: Optional[str] = Field(None, max_length=20, description="Decoded table QR code of the customer")


class ReviewResponse(BaseModel):
    id: int
    name: str
    rating: int
    review_text: Optional[str] = None
    booking_id: Optional[int] = None
    user_id: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewStats(BaseModel):
    total_reviews: int
    average_rating: float
    distribution: Dict[int, int]
