"""Dashboard and report schemas."""

from typing import Dict, List

from pydantic import BaseModel

from tableside.schemas.common import Money
from tableside.schemas.order import BookingResponse


class RevenueBucketResponse(BaseModel):
    key: str
    label: str
    revenue: Money
    count: int


class ItemStatResponse(BaseModel):
    name: str
    quantity: int
    revenue: Money


class OrderSummaryResponse(BaseModel):
    total_orders: int
    total_revenue: Money
    average_order_value: Money
    status_counts: Dict[str, int]


class DashboardResponse(BaseModel):
    total_bookings: int
    total_revenue: Money
    average_rating: float
    occupied_tables: int
    total_tables: int
    recent_bookings: List[BookingResponse]
    popular_items: List[ItemStatResponse]
    monthly_revenue: List[RevenueBucketResponse]


class ReportResponse(BaseModel):
    range: str
    summary: OrderSummaryResponse
    top_items: List[ItemStatResponse]
    hourly: List[RevenueBucketResponse]
