"""Order routes - customer ordering, kitchen board, history and payments."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Query, Request, status

from tableside.core.rate_limit import limiter
from tableside.core.rbac import RequireStaff
from tableside.core.validators import PositiveIntId
from tableside.db.session import DbSession
from tableside.schemas.order import OrderCreate, OrderResponse, OrderStatusUpdate
from tableside.services import order_service

router = APIRouter()


# ==================== CUSTOMER ====================

@router.post("/", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def place_order(request: Request, data: OrderCreate, db: DbSession):
    """Place an order from a scanned table. Prices are copied from the current menu."""
    return order_service.place_order(db, data.table_id, data.items)


# ==================== STAFF ====================

@router.get("/active", response_model=List[OrderResponse])
def list_active_orders(db: DbSession, current_user: RequireStaff):
    """Pending and preparing orders, newest first."""
    return order_service.active_orders(db)


@router.get("/recent", response_model=List[OrderResponse])
def list_recent_orders(
    db: DbSession, current_user: RequireStaff, limit: int = Query(order_service.RECENT_ORDER_LIMIT, ge=1, le=100),
):
    return order_service.recent_orders(db, limit=limit)


@router.get("/history", response_model=List[OrderResponse])
def order_history(
    db: DbSession,
    current_user: RequireStaff,
    date_range: Literal["today", "week", "month", "all"] = Query("all", alias="range"),
    search: Optional[str] = Query(None, max_length=50),
    status_filter: Optional[str] = Query(None, alias="status"),
):
    return order_service.order_history(db, date_range=date_range, search=search, status=status_filter)


@router.get("/payments", response_model=List[OrderResponse])
def list_payable_orders(db: DbSession, current_user: RequireStaff, table_id: Optional[str] = None):
    """Orders that can still be settled."""
    return order_service.payable_orders(db, table_code=table_id)


@router.get("/{order_id}", response_model=OrderResponse)
def track_order(order_id: PositiveIntId, db: DbSession):
    """Order status for the customer who placed it."""
    return order_service.get_order(db, order_id)


@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: PositiveIntId, data: OrderStatusUpdate, db: DbSession, current_user: RequireStaff):
    return order_service.update_status(db, order_id, data.status)


@router.post("/{order_id}/pay", response_model=OrderResponse)
def mark_order_paid(order_id: PositiveIntId, db: DbSession, current_user: RequireStaff):
    return order_service.mark_paid(db, order_id)
