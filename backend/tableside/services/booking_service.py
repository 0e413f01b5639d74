"""Multi-table meal bookings and table occupancy.

A booking for N tables is stored as N ``MealBooking`` rows sharing a
``group_id``. Creating a group and freeing its tables each happen in one
transaction.
"""

import logging
import uuid
from typing import Any, List, Optional, Sequence

from sqlalchemy.orm import Session, joinedload

from tableside.core.config import settings
from tableside.core.errors import Conflict, NotFound, ValidationFailed
from tableside.core.validators import is_valid_table_code
from tableside.models.orders import BookingStatus, MealBooking
from tableside.models.tables import DiningTable
from tableside.services import menu_service
from tableside.services.order_lifecycle import advance_booking, parse_booking_status
from tableside.services.pricing import compute_totals

logger = logging.getLogger(__name__)

RECENT_BOOKING_LIMIT = 5


def _validate_table_ids(table_ids: Sequence[int]) -> List[int]:
    if not table_ids:
        raise ValidationFailed("Select at least one table")
    unique_ids = list(dict.fromkeys(table_ids))
    if len(unique_ids) != len(table_ids):
        raise ValidationFailed("Each table can only be selected once")
    if len(unique_ids) > settings.max_tables_per_booking:
        raise ValidationFailed(f"A booking can cover at most {settings.max_tables_per_booking} tables")
    return unique_ids


def create_multi_table_booking(
    db: Session,
    user_id: str,
    table_ids: Sequence[int],
    cart: Sequence[Any],
) -> List[MealBooking]:
    """Book the same cart at every selected table and mark the tables occupied.

    Either every row is written and every table is occupied, or nothing is.
    """
    if not is_valid_table_code(user_id):
        raise ValidationFailed(f"Invalid table code: {user_id!r}")
    unique_ids = _validate_table_ids(table_ids)

    try:
        snapshot = menu_service.snapshot_from_cart(db, cart)
        totals = compute_totals(snapshot.lines).rounded()

        tables = (
            db.query(DiningTable)
            .filter(DiningTable.id.in_(unique_ids))
            .with_for_update()
            .all()
        )
        by_id = {t.id: t for t in tables}
        for table_id in unique_ids:
            if table_id not in by_id:
                raise NotFound("Table", table_id)
        occupied = [by_id[t].name for t in unique_ids if by_id[t].is_occupied]
        if occupied:
            raise Conflict(f"Already occupied: {', '.join(occupied)}")

        group_id = str(uuid.uuid4())
        items = snapshot.to_json()
        bookings = []
        for table_id in unique_ids:
            booking = MealBooking(
                group_id=group_id,
                user_id=user_id,
                table_id=table_id,
                items=list(items),
                subtotal=totals.subtotal,
                tax_amount=totals.tax,
                total_amount=totals.total,
                status=BookingStatus.PENDING.value,
            )
            db.add(booking)
            bookings.append(booking)
            by_id[table_id].is_occupied = True

        menu_service.record_item_orders(db, cart)
        db.commit()
    except Exception:
        db.rollback()
        raise

    for booking in bookings:
        db.refresh(booking)
    logger.info(f"Booking group {group_id}: {len(bookings)} tables for {user_id}, {totals.total} each")
    return bookings


def get_booking(db: Session, booking_id: int) -> MealBooking:
    booking = (
        db.query(MealBooking)
        .options(joinedload(MealBooking.table))
        .filter(MealBooking.id == booking_id)
        .first()
    )
    if not booking:
        raise NotFound("Booking", booking_id)
    return booking


def group_bookings(db: Session, group_id: str) -> List[MealBooking]:
    return (
        db.query(MealBooking)
        .options(joinedload(MealBooking.table))
        .filter(MealBooking.group_id == group_id)
        .order_by(MealBooking.id)
        .all()
    )


def list_bookings(
    db: Session,
    status: Optional[str] = None,
    user_id: Optional[str] = None,
) -> List[MealBooking]:
    query = db.query(MealBooking).options(joinedload(MealBooking.table))
    if status:
        query = query.filter(MealBooking.status == status)
    if user_id:
        query = query.filter(MealBooking.user_id == user_id)
    return query.order_by(MealBooking.created_at.desc(), MealBooking.id.desc()).all()


def recent_bookings(db: Session, limit: int = RECENT_BOOKING_LIMIT) -> List[MealBooking]:
    return (
        db.query(MealBooking)
        .options(joinedload(MealBooking.table))
        .order_by(MealBooking.created_at.desc(), MealBooking.id.desc())
        .limit(limit)
        .all()
    )


def confirm_booking(db: Session, booking_id: int) -> List[MealBooking]:
    """Confirm every booking in the group of *booking_id*."""
    booking = get_booking(db, booking_id)
    group = group_bookings(db, booking.group_id)
    for row in group:
        advance_booking(row, BookingStatus.CONFIRMED)
    db.commit()
    return group_bookings(db, booking.group_id)


def complete_booking(db: Session, booking_id: int) -> List[MealBooking]:
    """Complete the whole group and free every table it occupied.

    Completing an already completed group changes nothing; its tables may
    have been booked again since.
    """
    booking = get_booking(db, booking_id)
    group = group_bookings(db, booking.group_id)
    open_rows = [row for row in group if row.status != BookingStatus.COMPLETED.value]
    if not open_rows:
        logger.info(f"Booking group {booking.group_id} already completed")
        return group

    try:
        for row in open_rows:
            advance_booking(row, BookingStatus.COMPLETED)
            if row.table is not None:
                row.table.is_occupied = False
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Booking group {booking.group_id} completed, {len(open_rows)} tables freed")
    return group_bookings(db, booking.group_id)


def update_status(db: Session, booking_id: int, status: Any) -> List[MealBooking]:
    target = parse_booking_status(status)
    if target == BookingStatus.COMPLETED:
        return complete_booking(db, booking_id)
    if target == BookingStatus.CONFIRMED:
        return confirm_booking(db, booking_id)
    booking = get_booking(db, booking_id)
    advance_booking(booking, target)
    db.commit()
    return group_bookings(db, booking.group_id)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def list_tables(db: Session, occupied: Optional[bool] = None) -> List[DiningTable]:
    query = db.query(DiningTable)
    if occupied is not None:
        query = query.filter(DiningTable.is_occupied == occupied)
    return query.order_by(DiningTable.name).all()


def get_table(db: Session, table_id: int) -> DiningTable:
    table = db.query(DiningTable).filter(DiningTable.id == table_id).first()
    if not table:
        raise NotFound("Table", table_id)
    return table


def _ensure_unique_table_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(DiningTable).filter(DiningTable.name == name)
    if exclude_id is not None:
        query = query.filter(DiningTable.id != exclude_id)
    if query.first():
        raise Conflict(f"Table '{name}' already exists")


def create_table(db: Session, data: dict) -> DiningTable:
    _ensure_unique_table_name(db, data["name"])
    table = DiningTable(**data)
    db.add(table)
    db.commit()
    db.refresh(table)
    return table


def update_table(db: Session, table_id: int, data: dict) -> DiningTable:
    table = get_table(db, table_id)
    if data.get("name") is not None:
        _ensure_unique_table_name(db, data["name"], exclude_id=table_id)
    for field, value in data.items():
        setattr(table, field, value)
    db.commit()
    db.refresh(table)
    return table


def set_table_occupancy(db: Session, table_id: int, occupied: bool) -> DiningTable:
    table = get_table(db, table_id)
    table.is_occupied = occupied
    db.commit()
    db.refresh(table)
    return table


def delete_table(db: Session, table_id: int) -> None:
    table = get_table(db, table_id)
    if table.is_occupied:
        raise Conflict(f"Table {table.name} is occupied")
    db.delete(table)
    db.commit()
