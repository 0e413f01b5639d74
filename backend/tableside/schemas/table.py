"""Dining table schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class TableCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    capacity: int = Field(4, gt=0)


class TableUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    capacity: Optional[int] = Field(None, gt=0)


class OccupancyUpdate(BaseModel):
    is_occupied: bool


class TableResponse(BaseModel):
    id: int
    name: str
    capacity: int
    is_occupied: bool

    model_config = {"from_attributes": True}
