"""Meal booking routes."""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from tableside.core.rate_limit import limiter
from tableside.core.rbac import RequireStaff
from tableside.core.validators import PositiveIntId
from tableside.db.session import DbSession
from tableside.schemas.order import (
    BookingCreate,
    BookingGroupResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from tableside.services import booking_service

router = APIRouter()


def _group(bookings) -> dict:
    return {"group_id": bookings[0].group_id, "bookings": bookings}


@router.post("/", response_model=BookingGroupResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("20/minute")
def create_booking(request: Request, data: BookingCreate, db: DbSession):
    """Book the same meal at one or more tables."""
    bookings = booking_service.create_multi_table_booking(db, data.user_id, data.table_ids, data.items)
    return _group(bookings)


@router.get("/", response_model=List[BookingResponse])
def list_bookings(
    db: DbSession,
    current_user: RequireStaff,
    status_filter: Optional[str] = Query(None, alias="status"),
    user_id: Optional[str] = None,
):
    return booking_service.list_bookings(db, status=status_filter, user_id=user_id)


@router.get("/{booking_id}", response_model=BookingGroupResponse)
def track_booking(booking_id: PositiveIntId, db: DbSession):
    """The booking and every other table booked with it."""
    booking = booking_service.get_booking(db, booking_id)
    return _group(booking_service.group_bookings(db, booking.group_id))


@router.post("/{booking_id}/complete", response_model=BookingGroupResponse)
def complete_booking(booking_id: PositiveIntId, db: DbSession):
    """Finish the meal and free every table in the group."""
    return _group(booking_service.complete_booking(db, booking_id))


@router.put("/{booking_id}/status", response_model=BookingGroupResponse)
def update_booking_status(
    booking_id: PositiveIntId, data: BookingStatusUpdate, db: DbSession, current_user: RequireStaff,
):
    return _group(booking_service.update_status(db, booking_id, data.status))
