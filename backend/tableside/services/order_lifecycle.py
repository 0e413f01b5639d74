"""Order and booking status state machines.

Every status write in the service layer goes through ``advance_order`` or
``advance_booking`` so the legal transition set lives in one place.
"""

import logging
from typing import Dict, FrozenSet, Optional, Union

from tableside.core.errors import Conflict, ValidationFailed
from tableside.models.orders import BookingStatus, OrderStatus

logger = logging.getLogger(__name__)

ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.PAID}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.PAID}),
    OrderStatus.PAID: frozenset(),
}

BOOKING_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.COMPLETED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.COMPLETED: frozenset(),
}

# Statuses shown on the kitchen's active board
ACTIVE_ORDER_STATUSES = (OrderStatus.PENDING, OrderStatus.PREPARING)

# Statuses the payments page can settle
PAYABLE_ORDER_STATUSES = (OrderStatus.PENDING, OrderStatus.DELIVERED)

_KITCHEN_FLOW = {
    OrderStatus.PENDING: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.DELIVERED,
}


def parse_order_status(value: Union[str, OrderStatus]) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationFailed(f"Unknown order status: {value}")


def parse_booking_status(value: Union[str, BookingStatus]) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError:
        raise ValidationFailed(f"Unknown booking status: {value}")


def can_transition_order(current, target) -> bool:
    return parse_order_status(target) in ORDER_TRANSITIONS[parse_order_status(current)]


def can_transition_booking(current, target) -> bool:
    return parse_booking_status(target) in BOOKING_TRANSITIONS[parse_booking_status(current)]


def next_kitchen_status(current) -> Optional[OrderStatus]:
    """The next step on the kitchen board, or None once delivered or paid."""
    return _KITCHEN_FLOW.get(parse_order_status(current))


def advance_order(order, target) -> OrderStatus:
    """Move *order* to *target*, raising Conflict for an illegal step."""
    current = parse_order_status(order.status)
    new_status = parse_order_status(target)
    if new_status not in ORDER_TRANSITIONS[current]:
        raise Conflict(f"Order {order.id} cannot move from {current.value} to {new_status.value}")
    order.status = new_status.value
    logger.info(f"Order {order.id}: {current.value} -> {new_status.value}")
    return new_status


def advance_booking(booking, target) -> BookingStatus:
    current = parse_booking_status(booking.status)
    new_status = parse_booking_status(target)
    if new_status not in BOOKING_TRANSITIONS[current]:
        raise Conflict(f"Booking {booking.id} cannot move from {current.value} to {new_status.value}")
    booking.status = new_status.value
    logger.info(f"Booking {booking.id}: {current.value} -> {new_status.value}")
    return new_status
