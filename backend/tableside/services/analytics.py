"""Revenue bucketing and item rankings.

Pure functions over already-fetched rows. Anything with ``created_at``
(naive UTC), ``total_amount``, ``status`` and ``items`` works, so orders
and meal bookings share the same code.
"""

from __future__ import annotations

import calendar
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from tableside.core.config import settings
from tableside.core.errors import ValidationFailed
from tableside.services.pricing import OrderSnapshot, round_money, to_decimal

DATE_RANGES = ("today", "week", "month", "all")
RANK_METRICS = ("quantity", "revenue")


@dataclass
class RevenueBucket:
    key: str
    label: str
    revenue: Decimal = Decimal("0")
    count: int = 0

    def add(self, amount: Decimal) -> None:
        self.revenue += amount
        self.count += 1

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "revenue": round_money(self.revenue),
            "count": self.count,
        }


@dataclass
class ItemStat:
    name: str
    quantity: int = 0
    revenue: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {"name": self.name, "quantity": self.quantity, "revenue": round_money(self.revenue)}


@dataclass
class OrderSummary:
    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    status_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total_orders": self.total_orders,
            "total_revenue": round_money(self.total_revenue),
            "average_order_value": round_money(self.average_order_value),
            "status_counts": dict(self.status_counts),
        }


def _tz(tz: Optional[tzinfo]) -> tzinfo:
    return tz if tz is not None else settings.business_tz


def _local(moment: datetime, tz: tzinfo) -> datetime:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz)


def _now(now: Optional[datetime], tz: tzinfo) -> datetime:
    return _local(now if now is not None else datetime.now(timezone.utc), tz)


def _amount(row: Any) -> Decimal:
    return to_decimal(row.total_amount or 0)


def daily_revenue(orders: Iterable[Any], now: Optional[datetime] = None,
                  days: int = 30, tz: Optional[tzinfo] = None) -> List[RevenueBucket]:
    """Trailing *days* calendar days, today included, keyed by ISO date."""
    zone = _tz(tz)
    today = _now(now, zone).date()
    start = today - timedelta(days=days - 1)
    buckets: Dict[date, RevenueBucket] = {}
    for offset in range(days):
        day = start + timedelta(days=offset)
        buckets[day] = RevenueBucket(key=day.isoformat(), label=day.isoformat())

    for row in orders:
        bucket = buckets.get(_local(row.created_at, zone).date())
        if bucket is not None:
            bucket.add(_amount(row))
    return sorted(buckets.values(), key=lambda b: b.key)


def weekly_revenue(orders: Iterable[Any], now: Optional[datetime] = None,
                   weeks: int = 12, tz: Optional[tzinfo] = None) -> List[RevenueBucket]:
    """Rolling 7-day windows ending today, keyed by each window's first day."""
    zone = _tz(tz)
    today = _now(now, zone).date()
    buckets: List[RevenueBucket] = []
    for index in range(weeks):
        window_start = today - timedelta(days=7 * index + 6)
        buckets.append(RevenueBucket(
            key=window_start.isoformat(),
            label=f"Week of {window_start.isoformat()}",
        ))

    for row in orders:
        age = (today - _local(row.created_at, zone).date()).days
        if 0 <= age < 7 * weeks:
            buckets[age // 7].add(_amount(row))
    return sorted(buckets, key=lambda b: b.key)


def _shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_revenue(orders: Iterable[Any], now: Optional[datetime] = None,
                    months: int = 12, tz: Optional[tzinfo] = None) -> List[RevenueBucket]:
    """Trailing *months* calendar months keyed ``YYYY-MM``, labelled ``Jan`` etc."""
    zone = _tz(tz)
    current = _now(now, zone)
    buckets: Dict[str, RevenueBucket] = {}
    for back in range(months):
        year, month = _shift_month(current.year, current.month, -back)
        key = f"{year:04d}-{month:02d}"
        buckets[key] = RevenueBucket(key=key, label=calendar.month_abbr[month])

    for row in orders:
        local = _local(row.created_at, zone)
        bucket = buckets.get(f"{local.year:04d}-{local.month:02d}")
        if bucket is not None:
            bucket.add(_amount(row))
    return sorted(buckets.values(), key=lambda b: b.key)


def hourly_breakdown(orders: Iterable[Any], tz: Optional[tzinfo] = None) -> List[RevenueBucket]:
    """24 buckets, one per local hour of day."""
    zone = _tz(tz)
    buckets = [RevenueBucket(key=f"{hour:02d}", label=f"{hour:02d}:00") for hour in range(24)]
    for row in orders:
        buckets[_local(row.created_at, zone).hour].add(_amount(row))
    return buckets


def status_counts(orders: Iterable[Any]) -> Dict[str, int]:
    return dict(Counter(str(row.status) for row in orders))


def summarize_orders(orders: Iterable[Any]) -> OrderSummary:
    rows = list(orders)
    revenue = sum((_amount(row) for row in rows), Decimal("0"))
    average = revenue / len(rows) if rows else Decimal("0")
    return OrderSummary(
        total_orders=len(rows),
        total_revenue=revenue,
        average_order_value=average,
        status_counts=status_counts(rows),
    )


def range_start(range_name: str, now: Optional[datetime] = None,
                tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Naive-UTC lower bound for a named range, None for ``all``."""
    if range_name not in DATE_RANGES:
        raise ValidationFailed(f"Unknown date range: {range_name}. Use one of {', '.join(DATE_RANGES)}")
    zone = _tz(tz)
    current = _now(now, zone)
    if range_name == "all":
        return None
    if range_name == "today":
        start = current.replace(hour=0, minute=0, second=0, microsecond=0)
    elif range_name == "week":
        start = current - timedelta(days=7)
    else:
        year, month = _shift_month(current.year, current.month, -1)
        day = min(current.day, calendar.monthrange(year, month)[1])
        start = current.replace(year=year, month=month, day=day)
    return start.astimezone(timezone.utc).replace(tzinfo=None)


def filter_by_range(orders: Iterable[Any], range_name: str, now: Optional[datetime] = None,
                    tz: Optional[tzinfo] = None) -> List[Any]:
    start = range_start(range_name, now, tz)
    if start is None:
        return list(orders)
    return [row for row in orders if row.created_at >= start]


def top_items(orders: Iterable[Any], by: str = "quantity", limit: int = 5) -> List[ItemStat]:
    """Rank snapshot lines by total quantity or revenue.

    Names are matched exactly (case-sensitive). Ties break on name so the
    result does not depend on row order.
    """
    if by not in RANK_METRICS:
        raise ValidationFailed(f"Cannot rank items by {by}")
    stats: Dict[str, ItemStat] = {}
    for row in orders:
        for line in OrderSnapshot.from_json(row.items).lines:
            stat = stats.setdefault(line.name, ItemStat(name=line.name))
            stat.quantity += line.quantity
            stat.revenue += line.line_total

    ranked = sorted(stats.values(), key=lambda s: (-getattr(s, by), s.name))
    return ranked[:limit]
