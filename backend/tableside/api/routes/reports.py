"""Sales report routes."""

from typing import List, Literal

from fastapi import APIRouter, Query

from tableside.core.rbac import RequireManager
from tableside.db.session import DbSession
from tableside.schemas.reports import ReportResponse, RevenueBucketResponse
from tableside.services import dashboard_service

router = APIRouter()


@router.get("/sales", response_model=ReportResponse)
def sales_report(
    db: DbSession,
    current_user: RequireManager,
    date_range: Literal["today", "week", "month", "all"] = Query("today", alias="range"),
):
    """Order totals, status counts, top items by revenue and hourly breakdown."""
    return dashboard_service.build_report(db, date_range)


@router.get("/revenue/{period}", response_model=List[RevenueBucketResponse])
def revenue(period: Literal["daily", "weekly", "monthly"], db: DbSession, current_user: RequireManager):
    """Order revenue bucketed by day (30), rolling week (12) or month (12)."""
    return dashboard_service.revenue_series(db, period)
