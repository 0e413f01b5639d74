"""Customer review model."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from tableside.db.base import Base, TimestampMixin
from tableside.models.validators import star_rating


class Review(Base, TimestampMixin):
    """A 1-5 star review, optionally tied to the booking and customer it is about."""

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    review_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Scanned table code of the customer, copied from the booking when there is one
    user_id: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)
    booking_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("meal_bookings.id", ondelete="SET NULL"), nullable=True
    )

    @validates("rating")
    def _validate_rating(self, key, value):
        return star_rating(key, value)
