"""Order and meal booking models.

Both keep a point-in-time copy of the cart in ``items`` as a list of
``{"name", "price", "quantity"}`` dicts, so later menu edits never change
what was ordered or what it cost.
"""

from __future__ import annotations

import enum
from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, JSON, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from tableside.db.base import Base, TimestampMixin
from tableside.models.tables import DiningTable
from tableside.models.validators import non_negative, validate_list_of_dicts


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    PAID = "paid"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


class Order(Base, TimestampMixin):
    """A direct menu order placed from a scanned table."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)
    table_id: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # scanned code, e.g. 22/CS/062
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=OrderStatus.PENDING.value, nullable=False, index=True
    )

    @validates("subtotal", "tax_amount", "total_amount")
    def _validate_amounts(self, key, value):
        return non_negative(key, value)

    @validates("items")
    def _validate_items(self, key, value):
        return validate_list_of_dicts(key, value)


class MealBooking(Base, TimestampMixin):
    """One table's share of a (possibly multi-table) meal booking.

    Rows created together share a ``group_id``.
    """

    __tablename__ = "meal_bookings"

    id: Mapped[int] = mapped_column(primary_key=True)
    group_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # scanned code
    table_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("tables.id", ondelete="SET NULL"), nullable=True, index=True
    )
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=BookingStatus.PENDING.value, nullable=False, index=True
    )

    table: Mapped[Optional[DiningTable]] = relationship(DiningTable)

    @property
    def table_name(self) -> Optional[str]:
        return self.table.name if self.table is not None else None

    @validates("subtotal", "tax_amount", "total_amount")
    def _validate_amounts(self, key, value):
        return non_negative(key, value)

    @validates("items")
    def _validate_items(self, key, value):
        return validate_list_of_dicts(key, value)
