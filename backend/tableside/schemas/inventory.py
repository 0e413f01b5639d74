"""Inventory schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from tableside.schemas.common import Money, NonNegativeMoney

Quantity = Annotated[Money, Field(ge=0, max_digits=10, decimal_places=2)]


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    quantity: Quantity = Decimal("0")
    unit: str = Field(..., min_length=1, max_length=20)
    min_quantity: Quantity = Decimal("0")
    cost_per_unit: NonNegativeMoney = Decimal("0")
    supplier: Optional[str] = Field(None, max_length=200)


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    quantity: Optional[Quantity] = None
    unit: Optional[str] = Field(None, min_length=1, max_length=20)
    min_quantity: Optional[Quantity] = None
    cost_per_unit: Optional[NonNegativeMoney] = None
    supplier: Optional[str] = Field(None, max_length=200)


class RestockRequest(BaseModel):
    amount: Annotated[Money, Field(gt=0, max_digits=10, decimal_places=2)]


class InventoryItemResponse(BaseModel):
    id: int
    name: str
    category: str
    quantity: Money
    unit: str
    min_quantity: Money
    cost_per_unit: Money
    supplier: Optional[str] = None
    last_restocked: Optional[datetime] = None
    is_low_stock: bool
    updated_at: datetime

    model_config = {"from_attributes": True}
