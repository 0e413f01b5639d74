"""Named read models that refresh when their source tables change.

Each view is a plain fetch function plus the tables it reads. A
``LiveView`` subscribes to those tables on the change feed and re-runs
the whole fetch after every committed change; there is no diffing.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from tableside.core.errors import NotFound, ValidationFailed
from tableside.db.change_capture import ChangeEvent, ChangeFeed, Subscription, change_feed
from tableside.schemas.inventory import InventoryItemResponse
from tableside.schemas.menu import CustomerMenuResponse, MenuCategoryResponse, MenuItemResponse
from tableside.schemas.order import BookingGroupResponse, OrderResponse
from tableside.schemas.reports import DashboardResponse
from tableside.schemas.review import ReviewResponse
from tableside.schemas.staff import PermissionResponse, RoleResponse, StaffResponse
from tableside.schemas.table import TableResponse
from tableside.services import (
    booking_service,
    dashboard_service,
    inventory_service,
    menu_service,
    order_service,
    review_service,
    role_service,
    staff_service,
)

logger = logging.getLogger(__name__)


def _dump_list(schema, rows) -> List[dict]:
    return [schema.model_validate(row, from_attributes=True).model_dump(mode="json") for row in rows]


def _dump(schema, value) -> dict:
    return schema.model_validate(value, from_attributes=True).model_dump(mode="json")


@dataclass(frozen=True)
class ViewSpec:
    name: str
    tables: Tuple[str, ...]
    fetch: Callable[..., Any]
    public: bool = False
    key_param: Optional[str] = None

    def row_filter(self, params: Dict[str, Any]) -> Optional[Callable[[ChangeEvent], bool]]:
        """Keyed views only react to changes of their own row on the first table."""
        if self.key_param is None:
            return None
        key = params[self.key_param]
        primary = self.tables[0]
        return lambda event: event.table != primary or event.row_id == key


def _fetch_booking(db: Session, booking_id: int) -> dict:
    booking = booking_service.get_booking(db, booking_id)
    group = booking_service.group_bookings(db, booking.group_id)
    return _dump(BookingGroupResponse, {"group_id": booking.group_id, "bookings": group})


def _fetch_roles(db: Session) -> dict:
    return {
        "roles": _dump_list(RoleResponse, role_service.list_roles(db)),
        "permissions": _dump_list(PermissionResponse, role_service.list_permissions(db)),
    }


VIEWS: Dict[str, ViewSpec] = {
    spec.name: spec
    for spec in (
        ViewSpec(
            "dashboard",
            ("meal_bookings", "reviews", "tables"),
            lambda db: _dump(DashboardResponse, dashboard_service.build_dashboard(db)),
        ),
        ViewSpec(
            "active_orders",
            ("orders",),
            lambda db: _dump_list(OrderResponse, order_service.active_orders(db)),
        ),
        ViewSpec(
            "recent_orders",
            ("orders",),
            lambda db: _dump_list(OrderResponse, order_service.recent_orders(db)),
        ),
        ViewSpec(
            "payments",
            ("orders",),
            lambda db: _dump_list(OrderResponse, order_service.payable_orders(db)),
        ),
        ViewSpec(
            "inventory",
            ("inventory",),
            lambda db: _dump_list(InventoryItemResponse, inventory_service.list_items(db)),
        ),
        ViewSpec(
            "menu",
            ("menu_items", "menu_categories"),
            lambda db: {
                "items": _dump_list(MenuItemResponse, menu_service.list_items(db)),
                "categories": _dump_list(MenuCategoryResponse, menu_service.list_categories(db)),
            },
        ),
        ViewSpec(
            "customer_menu",
            ("menu_items", "menu_categories"),
            lambda db: _dump(CustomerMenuResponse, menu_service.fetch_customer_menu(db)),
            public=True,
        ),
        ViewSpec(
            "staff",
            ("staff",),
            lambda db: _dump_list(StaffResponse, staff_service.list_staff(db)),
        ),
        ViewSpec("roles", ("staff_roles", "permissions"), _fetch_roles),
        ViewSpec(
            "reviews",
            ("reviews",),
            lambda db: _dump_list(ReviewResponse, review_service.list_reviews(db)),
        ),
        ViewSpec(
            "tables",
            ("tables",),
            lambda db: _dump_list(TableResponse, booking_service.list_tables(db)),
        ),
        ViewSpec(
            "order",
            ("orders",),
            lambda db, order_id: _dump(OrderResponse, order_service.get_order(db, order_id)),
            public=True,
            key_param="order_id",
        ),
        ViewSpec(
            "booking",
            ("meal_bookings",),
            _fetch_booking,
            public=True,
            key_param="booking_id",
        ),
    )
}


def get_view(name: str) -> ViewSpec:
    spec = VIEWS.get(name)
    if spec is None:
        raise NotFound("View", name)
    return spec


def _view_params(spec: ViewSpec, params: Dict[str, Any]) -> Dict[str, Any]:
    if spec.key_param is None:
        return {}
    value = params.get(spec.key_param)
    if value is None:
        raise ValidationFailed(f"View {spec.name} needs {spec.key_param}")
    try:
        return {spec.key_param: int(value)}
    except (TypeError, ValueError):
        raise ValidationFailed(f"{spec.key_param} must be an integer")


def fetch_view(db: Session, name: str, **params) -> Any:
    spec = get_view(name)
    return spec.fetch(db, **_view_params(spec, params))


class LiveView:
    """A view that reacts to every commit touching its tables.

    By default the view refetches and hands the fresh copy to ``on_update``
    on the committing thread. With ``on_stale`` it only reports the change
    and the owner calls ``current()`` when it is ready, keeping the refetch
    off the writer's request.

    ``session_factory`` is called for each fetch because change events
    arrive on whichever thread committed.
    """

    def __init__(
        self,
        name: str,
        session_factory: Callable[[], Session],
        on_update: Optional[Callable[[Any], None]] = None,
        feed: Optional[ChangeFeed] = None,
        on_stale: Optional[Callable[[ChangeEvent], None]] = None,
        **params,
    ):
        if on_update is None and on_stale is None:
            raise ValueError("LiveView needs on_update or on_stale")
        self.spec = get_view(name)
        self.params = _view_params(self.spec, params)
        self.session_factory = session_factory
        self.on_update = on_update
        self.on_stale = on_stale
        self.feed = feed or change_feed
        self._lock = threading.Lock()
        self._closed = False
        row_filter = self.spec.row_filter(self.params)
        self._subscriptions: List[Subscription] = [
            self.feed.subscribe(table, self._on_change, row_filter) for table in self.spec.tables
        ]

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def closed(self) -> bool:
        return self._closed

    def current(self) -> Any:
        db = self.session_factory()
        try:
            return self.spec.fetch(db, **self.params)
        finally:
            db.close()

    def refresh(self) -> None:
        with self._lock:
            if self._closed:
                return
            data = self.current()
        self.on_update(data)

    def _on_change(self, event: ChangeEvent) -> None:
        if self._closed:
            return
        logger.debug(f"Live view {self.name} stale after {event.op} on {event.table}")
        if self.on_stale is not None:
            self.on_stale(event)
        else:
            self.refresh()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []
        logger.debug(f"Live view {self.name} closed")
