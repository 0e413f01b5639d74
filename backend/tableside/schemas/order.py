"""Order and meal booking schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from tableside.models.orders import BookingStatus, OrderStatus
from tableside.schemas.common import Money
from tableside.services.pricing import format_currency


class CartEntry(BaseModel):
    """One line of a customer's cart."""

    menu_item_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1, le=99)


class LineItemResponse(BaseModel):
    name: str
    price: Money
    quantity: int


class OrderCreate(BaseModel):
    table_id: str = Field(..., description="Decoded table QR code, e.g. 22/CS/062")
    items: List[CartEntry]


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class _PricedResponse(BaseModel):
    items: List[LineItemResponse]
    subtotal: Money
    tax_amount: Money
    total_amount: Money

    @computed_field
    @property
    def total_display(self) -> str:
        return format_currency(self.total_amount)


class OrderResponse(_PricedResponse):
    id: int
    table_id: str
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingCreate(BaseModel):
    user_id: str = Field(..., description="Decoded table QR code of the customer")
    table_ids: List[int]
    items: List[CartEntry]


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(_PricedResponse):
    id: int
    group_id: str
    user_id: str
    table_id: Optional[int] = None
    table_name: Optional[str] = None
    status: BookingStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingGroupResponse(BaseModel):
    group_id: str
    bookings: List[BookingResponse]

    @computed_field
    @property
    def replicated_total(self) -> Money:
        """Sum of the per-table rows. Each table carries a full copy of the cart."""
        return sum((b.total_amount for b in self.bookings), Decimal("0"))
