"""Direct orders: placement, tracking, kitchen board, history and payments."""

import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from tableside.core.errors import NotFound, ValidationFailed
from tableside.core.validators import is_valid_table_code
from tableside.models.orders import Order, OrderStatus
from tableside.services import analytics, menu_service
from tableside.services.order_lifecycle import (
    ACTIVE_ORDER_STATUSES,
    PAYABLE_ORDER_STATUSES,
    advance_order,
)
from tableside.services.pricing import compute_totals

logger = logging.getLogger(__name__)

RECENT_ORDER_LIMIT = 10


def place_order(db: Session, table_code: str, cart: Sequence[Any]) -> Order:
    """Price the cart against the current menu and store a pending order."""
    if not is_valid_table_code(table_code):
        raise ValidationFailed(f"Invalid table code: {table_code!r}")

    snapshot = menu_service.snapshot_from_cart(db, cart)
    totals = compute_totals(snapshot.lines).rounded()

    order = Order(
        table_id=table_code,
        items=snapshot.to_json(),
        subtotal=totals.subtotal,
        tax_amount=totals.tax,
        total_amount=totals.total,
        status=OrderStatus.PENDING.value,
    )
    db.add(order)
    menu_service.record_item_orders(db, cart)
    db.commit()
    db.refresh(order)
    logger.info(f"Order {order.id} placed for table {table_code}: {totals.total}")
    return order


def get_order(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFound("Order", order_id)
    return order


def active_orders(db: Session) -> List[Order]:
    statuses = [s.value for s in ACTIVE_ORDER_STATUSES]
    return (
        db.query(Order)
        .filter(Order.status.in_(statuses))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def recent_orders(db: Session, limit: int = RECENT_ORDER_LIMIT) -> List[Order]:
    return db.query(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).all()


def order_history(
    db: Session,
    date_range: str = "all",
    search: Optional[str] = None,
    status: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Order]:
    """Orders in a named date range, optionally matching a table code or id."""
    query = db.query(Order)
    start = analytics.range_start(date_range, now)
    if start is not None:
        query = query.filter(Order.created_at >= start)
    if status:
        query = query.filter(Order.status == status)
    if search:
        term = search.strip()
        query = query.filter(or_(
            Order.table_id.ilike(f"%{term}%"),
            cast(Order.id, String) == term,
        ))
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def orders_in_range(db: Session, date_range: str, now: Optional[datetime] = None) -> List[Order]:
    return order_history(db, date_range=date_range, now=now)


def payable_orders(db: Session, table_code: Optional[str] = None) -> List[Order]:
    """Orders that can still be settled, optionally for one table."""
    statuses = [s.value for s in PAYABLE_ORDER_STATUSES]
    query = db.query(Order).filter(Order.status.in_(statuses))
    if table_code:
        query = query.filter(Order.table_id == table_code)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def update_status(db: Session, order_id: int, status: Any) -> Order:
    order = get_order(db, order_id)
    advance_order(order, status)
    db.commit()
    db.refresh(order)
    return order


def mark_paid(db: Session, order_id: int) -> Order:
    return update_status(db, order_id, OrderStatus.PAID)
