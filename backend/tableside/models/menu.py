"""Menu models - items and the categories they are grouped under."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from tableside.db.base import Base, TimestampMixin
from tableside.models.validators import non_negative


class MenuItem(Base, TimestampMixin):
    """A dish or drink on the menu.

    ``category`` is a free-text label. It matches a ``MenuCategory`` by
    name only; there is no foreign key.
    """

    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    order_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    @validates("price", "order_count")
    def _validate_non_negative(self, key, value):
        return non_negative(key, value)


class MenuCategory(Base, TimestampMixin):
    """A named menu section with a display position."""

    __tablename__ = "menu_categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
