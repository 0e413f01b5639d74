"""Dining table model."""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from tableside.db.base import Base, TimestampMixin
from tableside.models.validators import positive


class DiningTable(Base, TimestampMixin):
    """Restaurant table for seating."""

    __tablename__ = "tables"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    is_occupied: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    @validates("capacity")
    def _validate_capacity(self, key, value):
        return positive(key, value)
