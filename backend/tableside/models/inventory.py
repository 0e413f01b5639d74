"""Inventory model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from tableside.db.base import Base, TimestampMixin
from tableside.models.validators import non_negative


class InventoryItem(Base, TimestampMixin):
    """A stocked ingredient or supply.

    ``is_low_stock`` is a snapshot taken whenever quantity or threshold is
    written; it is not recomputed on read.
    """

    __tablename__ = "inventory"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    min_quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    cost_per_unit: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    supplier: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    last_restocked: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_low_stock: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    @validates("quantity", "min_quantity", "cost_per_unit")
    def _validate_amounts(self, key, value):
        return non_negative(key, value)

    def refresh_low_stock(self) -> bool:
        self.is_low_stock = Decimal(str(self.quantity or 0)) <= Decimal(str(self.min_quantity or 0))
        return self.is_low_stock
