"""Menu item and category schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from tableside.schemas.common import Money, NonNegativeMoney


class MenuItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: NonNegativeMoney
    category: str = Field(..., min_length=1, max_length=100)
    image_url: Optional[str] = Field(None, max_length=500)
    is_available: bool = True


class MenuItemCreate(MenuItemBase):
    pass


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[NonNegativeMoney] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    image_url: Optional[str] = Field(None, max_length=500)
    is_available: Optional[bool] = None


class MenuItemResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Money
    category: str
    image_url: Optional[str] = None
    is_available: bool
    order_count: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MenuCategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    display_order: int = Field(0, ge=0)
    is_active: bool = True


class MenuCategoryCreate(MenuCategoryBase):
    pass


class MenuCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class MenuCategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    display_order: int
    is_active: bool

    model_config = {"from_attributes": True}


class CustomerMenuResponse(BaseModel):
    """What a customer sees after scanning a table code."""

    categories: List[MenuCategoryResponse]
    items: List[MenuItemResponse]
