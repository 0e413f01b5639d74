"""Table-scoped change feed fed by SQLAlchemy session hooks.

Inserts, updates and deletes are recorded when a session flushes and are
published to subscribers only once the surrounding transaction commits.
A rollback discards whatever was recorded.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

INSERT = "insert"
UPDATE = "update"
DELETE = "delete"

_PENDING_KEY = "tableside_pending_changes"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    op: str
    row_id: Any = None


ChangeCallback = Callable[[ChangeEvent], None]
RowFilter = Callable[[ChangeEvent], bool]


class Subscription:
    """Handle returned by ``ChangeFeed.subscribe``."""

    def __init__(self, feed: "ChangeFeed", table: str, callback: ChangeCallback,
                 row_filter: Optional[RowFilter] = None):
        self.feed = feed
        self.table = table
        self.callback = callback
        self.row_filter = row_filter
        self.active = True

    def matches(self, change: ChangeEvent) -> bool:
        if not self.active or change.table != self.table:
            return False
        return self.row_filter is None or self.row_filter(change)

    def unsubscribe(self) -> None:
        self.feed._remove(self)


class ChangeFeed:
    """Fan-out of committed row changes to per-table subscribers.

    Safe to use from the threadpool that runs sync endpoints. Callbacks
    run on the publishing thread; a failing callback is logged and does
    not stop delivery to the others.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._subscriptions: Dict[str, List[Subscription]] = {}

    def subscribe(self, table: str, callback: ChangeCallback,
                  row_filter: Optional[RowFilter] = None) -> Subscription:
        subscription = Subscription(self, table, callback, row_filter)
        with self._lock:
            self._subscriptions.setdefault(table, []).append(subscription)
        logger.debug(f"Subscribed to {table} changes")
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subscription.active = False
            subs = self._subscriptions.get(subscription.table, [])
            if subscription in subs:
                subs.remove(subscription)
            if not subs:
                self._subscriptions.pop(subscription.table, None)

    def subscriber_count(self, table: Optional[str] = None) -> int:
        with self._lock:
            if table is not None:
                return len(self._subscriptions.get(table, []))
            return sum(len(subs) for subs in self._subscriptions.values())

    def publish(self, change: ChangeEvent) -> None:
        with self._lock:
            targets = [s for s in self._subscriptions.get(change.table, []) if s.matches(change)]
        for subscription in targets:
            try:
                subscription.callback(change)
            except Exception as e:
                logger.error(f"Change subscriber for {change.table} failed: {e}", exc_info=True)


change_feed = ChangeFeed()


def _row_event(obj: Any, op: str) -> Optional[ChangeEvent]:
    table = getattr(obj, "__tablename__", None)
    if table is None:
        return None
    # primary keys are populated by the time after_flush runs, identity keys are not
    pk = inspect(obj).mapper.primary_key_from_instance(obj)
    row_id = pk[0] if len(pk) == 1 else tuple(pk)
    return ChangeEvent(table=table, op=op, row_id=row_id)


def _pending(session: Session) -> List[ChangeEvent]:
    return session.info.setdefault(_PENDING_KEY, [])


@event.listens_for(Session, "after_flush")
def _collect_changes(session: Session, flush_context) -> None:
    pending = _pending(session)
    for obj in session.new:
        change = _row_event(obj, INSERT)
        if change:
            pending.append(change)
    for obj in session.dirty:
        if session.is_modified(obj, include_collections=False):
            change = _row_event(obj, UPDATE)
            if change:
                pending.append(change)
    for obj in session.deleted:
        change = _row_event(obj, DELETE)
        if change:
            pending.append(change)


@event.listens_for(Session, "after_commit")
def _publish_changes(session: Session) -> None:
    changes = session.info.pop(_PENDING_KEY, [])
    for change in changes:
        change_feed.publish(change)


@event.listens_for(Session, "after_rollback")
def _discard_changes(session: Session) -> None:
    session.info.pop(_PENDING_KEY, None)
