"""Tests for order pricing: snapshots, GST totals and currency display."""

from decimal import Decimal

import pytest

from tableside.core.errors import ValidationFailed
from tableside.services.pricing import (
    LineItem,
    OrderSnapshot,
    compute_totals,
    format_currency,
)


def _cart():
    return [
        LineItem("Burger", Decimal("12.99"), 2),
        LineItem("Fries", Decimal("4.50"), 1),
    ]


class TestComputeTotals:
    def test_burger_and_fries_example(self):
        totals = compute_totals(_cart(), Decimal("0.18"))
        assert totals.subtotal == Decimal("30.48")
        assert totals.tax == Decimal("5.4864")
        assert totals.total == Decimal("35.9664")
        assert format_currency(totals.total) == "₹35.97"

    def test_subtotal_is_sum_of_price_times_quantity(self):
        lines = [LineItem("A", Decimal("1.10"), 3), LineItem("B", Decimal("0.05"), 7)]
        totals = compute_totals(lines, Decimal("0.18"))
        assert totals.subtotal == Decimal("3.30") + Decimal("0.35")
        assert totals.total == totals.subtotal * Decimal("1.18")

    def test_default_rate_comes_from_settings(self):
        assert compute_totals(_cart()).total == Decimal("35.9664")

    def test_empty_cart_is_zero(self):
        totals = compute_totals([], Decimal("0.18"))
        assert totals.subtotal == 0
        assert totals.total == 0


class TestRounding:
    def test_rounded_total_is_half_up_to_cents(self):
        rounded = compute_totals(_cart(), Decimal("0.18")).rounded()
        assert rounded.total == Decimal("35.97")
        assert rounded.subtotal == Decimal("30.48")

    def test_rounded_parts_add_up(self):
        rounded = compute_totals(_cart(), Decimal("0.18")).rounded()
        assert rounded.subtotal + rounded.tax == rounded.total
        assert rounded.tax == Decimal("5.49")

    def test_half_cent_rounds_up(self):
        # 0.25 * 1.18 = 0.295
        rounded = compute_totals([LineItem("Mint", Decimal("0.25"), 1)], Decimal("0.18")).rounded()
        assert rounded.total == Decimal("0.30")


class TestLineItem:
    def test_price_is_coerced_to_decimal(self):
        line = LineItem("Tea", 2.1, 1)
        assert line.price == Decimal("2.1")

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationFailed):
            LineItem("Refund", Decimal("-1"), 1)

    @pytest.mark.parametrize("quantity", [0, -2, 1.5, True])
    def test_bad_quantity_rejected(self, quantity):
        with pytest.raises(ValidationFailed):
            LineItem("Tea", Decimal("2"), quantity)


class TestOrderSnapshot:
    def test_json_keeps_name_price_quantity(self):
        snapshot = OrderSnapshot.from_lines(_cart())
        assert snapshot.to_json() == [
            {"name": "Burger", "price": 12.99, "quantity": 2},
            {"name": "Fries", "price": 4.5, "quantity": 1},
        ]

    def test_stored_items_rederive_the_same_total(self):
        snapshot = OrderSnapshot.from_lines(_cart())
        stored_total = compute_totals(snapshot.lines).rounded().total
        reloaded = OrderSnapshot.from_json(snapshot.to_json())
        assert compute_totals(reloaded.lines).rounded().total == stored_total

    def test_snapshot_is_immutable(self):
        snapshot = OrderSnapshot.from_lines(_cart())
        with pytest.raises(AttributeError):
            snapshot.lines = ()

    def test_from_menu_items_copies_current_price(self, menu_items):
        snapshot = OrderSnapshot.from_menu_items([(menu_items["burger"], 2)])
        menu_items["burger"].price = Decimal("99.00")
        assert snapshot.lines[0].price == Decimal("12.99")


class TestFormatCurrency:
    def test_symbol_and_two_places(self):
        assert format_currency(Decimal("5")) == "₹5.00"

    def test_custom_symbol(self):
        assert format_currency(Decimal("1.005"), symbol="$") == "$1.01"
