"""Order pricing: line items, snapshots, GST totals and currency display.

All arithmetic is done in ``Decimal``. Nothing is rounded until
``Totals.rounded()`` is called at the storage boundary, and from then on
``subtotal + tax == total`` holds exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from tableside.core.config import settings
from tableside.core.errors import ValidationFailed

CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce a JSON/ORM number to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationFailed(f"Not a valid amount: {value!r}") from e


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LineItem:
    """One cart line as it was priced when the order was placed."""

    name: str
    price: Decimal
    quantity: int

    def __post_init__(self):
        price = to_decimal(self.price)
        if price < 0:
            raise ValidationFailed(f"Price for {self.name} cannot be negative")
        qty = self.quantity
        if (
            isinstance(qty, bool)
            or not isinstance(qty, (int, float, Decimal))
            or qty != int(qty)
            or qty < 1
        ):
            raise ValidationFailed(f"Quantity for {self.name} must be a whole number of at least 1")
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "quantity", int(self.quantity))

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {"name": self.name, "price": float(self.price), "quantity": self.quantity}


@dataclass(frozen=True)
class OrderSnapshot:
    """Immutable copy of a cart, stored in the ``items`` JSON column."""

    lines: Tuple[LineItem, ...]

    @classmethod
    def from_lines(cls, lines: Iterable[LineItem]) -> "OrderSnapshot":
        return cls(tuple(lines))

    @classmethod
    def from_menu_items(cls, entries: Iterable[Tuple[Any, int]]) -> "OrderSnapshot":
        """Build from ``(menu_item, quantity)`` pairs, copying name and current price."""
        return cls(tuple(LineItem(item.name, item.price, quantity) for item, quantity in entries))

    @classmethod
    def from_json(cls, items: Optional[Sequence[dict]]) -> "OrderSnapshot":
        return cls(tuple(
            LineItem(entry["name"], entry["price"], entry["quantity"])
            for entry in (items or [])
        ))

    def to_json(self) -> List[dict]:
        return [line.to_dict() for line in self.lines]

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def rounded(self) -> "Totals":
        """Round the total to the minor unit and derive tax from it."""
        subtotal = round_money(self.subtotal)
        total = round_money(self.total)
        return Totals(subtotal=subtotal, tax=total - subtotal, total=total)


def compute_totals(lines: Iterable[LineItem], gst_rate: Optional[Decimal] = None) -> Totals:
    """Exact subtotal, GST and GST-inclusive total for a set of lines."""
    rate = to_decimal(settings.gst_rate if gst_rate is None else gst_rate)
    subtotal = sum((line.line_total for line in lines), Decimal("0"))
    return Totals(
        subtotal=subtotal,
        tax=subtotal * rate,
        total=subtotal * (Decimal("1") + rate),
    )


def format_currency(amount: Any, symbol: Optional[str] = None) -> str:
    """``Decimal("35.9664")`` -> ``"₹35.97"``."""
    sym = settings.currency_symbol if symbol is None else symbol
    return f"{sym}{round_money(to_decimal(amount))}"
