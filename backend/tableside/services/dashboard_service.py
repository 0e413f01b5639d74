"""Admin dashboard and sales reports.

The dashboard summarises meal bookings, reviews and tables; the reports
summarise direct orders. Both fetch rows once and hand them to the pure
functions in ``analytics``.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from tableside.models.orders import MealBooking, Order
from tableside.models.tables import DiningTable
from tableside.services import analytics, booking_service, order_service, review_service
from tableside.services.pricing import round_money

POPULAR_ITEM_LIMIT = 5
REPORT_TOP_ITEM_LIMIT = 5


def build_dashboard(db: Session, now: Optional[datetime] = None) -> dict:
    bookings = db.query(MealBooking).all()
    total_revenue = sum((Decimal(str(b.total_amount)) for b in bookings), Decimal("0"))
    total_tables = db.query(func.count(DiningTable.id)).scalar() or 0
    occupied_tables = (
        db.query(func.count(DiningTable.id)).filter(DiningTable.is_occupied.is_(True)).scalar() or 0
    )

    return {
        "total_bookings": len(bookings),
        "total_revenue": round_money(total_revenue),
        "average_rating": review_service.average_rating(db),
        "occupied_tables": occupied_tables,
        "total_tables": total_tables,
        "recent_bookings": booking_service.recent_bookings(db),
        "popular_items": [
            s.to_dict() for s in analytics.top_items(bookings, by="quantity", limit=POPULAR_ITEM_LIMIT)
        ],
        "monthly_revenue": [b.to_dict() for b in analytics.monthly_revenue(bookings, now)],
    }


def build_report(db: Session, date_range: str = "today", now: Optional[datetime] = None) -> dict:
    orders = order_service.orders_in_range(db, date_range, now)
    summary = analytics.summarize_orders(orders)
    return {
        "range": date_range,
        "summary": summary.to_dict(),
        "top_items": [
            s.to_dict() for s in analytics.top_items(orders, by="revenue", limit=REPORT_TOP_ITEM_LIMIT)
        ],
        "hourly": [b.to_dict() for b in analytics.hourly_breakdown(orders)],
    }


def revenue_series(db: Session, period: str, now: Optional[datetime] = None) -> list:
    """Daily, weekly or monthly order revenue buckets."""
    orders = db.query(Order).all()
    if period == "daily":
        buckets = analytics.daily_revenue(orders, now)
    elif period == "weekly":
        buckets = analytics.weekly_revenue(orders, now)
    else:
        buckets = analytics.monthly_revenue(orders, now)
    return [b.to_dict() for b in buckets]
