"""Tests for order placement, tracking, the kitchen board and payments."""

from datetime import timedelta
from decimal import Decimal

from tableside.db.base import utcnow
from tableside.models.orders import Order
from tableside.services.pricing import OrderSnapshot, compute_totals

from conftest import TABLE_CODE


def _place(client, menu_items, *lines, table=TABLE_CODE):
    return client.post("/api/v1/orders/", json={
        "table_id": table,
        "items": [{"menu_item_id": menu_items[name].id, "quantity": qty} for name, qty in lines],
    })


class TestPlaceOrder:
    def test_totals_include_gst(self, client, menu_items):
        res = _place(client, menu_items, ("burger", 2), ("fries", 1))
        assert res.status_code == 201
        data = res.json()
        assert data["status"] == "pending"
        assert data["subtotal"] == 30.48
        assert data["total_amount"] == 35.97
        assert data["tax_amount"] == 5.49
        assert data["total_display"] == "₹35.97"
        assert data["items"] == [
            {"name": "Burger", "price": 12.99, "quantity": 2},
            {"name": "Fries", "price": 4.5, "quantity": 1},
        ]

    def test_stored_total_matches_rederived_total(self, client, db_session, menu_items):
        order_id = _place(client, menu_items, ("burger", 3), ("fries", 2)).json()["id"]
        order = db_session.get(Order, order_id)
        rederived = compute_totals(OrderSnapshot.from_json(order.items).lines).rounded()
        assert rederived.total == order.total_amount
        assert order.subtotal + order.tax_amount == order.total_amount

    def test_price_edits_do_not_change_history(self, client, db_session, menu_items, auth_headers):
        order_id = _place(client, menu_items, ("burger", 1)).json()["id"]
        client.put(f"/api/v1/menu/items/{menu_items['burger'].id}", json={"price": "20.00"}, headers=auth_headers)
        data = client.get(f"/api/v1/orders/{order_id}").json()
        assert data["items"][0]["price"] == 12.99

    def test_repeated_items_merge(self, client, menu_items):
        data = _place(client, menu_items, ("fries", 1), ("fries", 2)).json()
        assert data["items"] == [{"name": "Fries", "price": 4.5, "quantity": 3}]

    def test_increments_order_count(self, client, db_session, menu_items):
        _place(client, menu_items, ("burger", 2))
        db_session.refresh(menu_items["burger"])
        assert menu_items["burger"].order_count == 1

    def test_invalid_table_code(self, client, menu_items):
        res = _place(client, menu_items, ("burger", 1), table="table-5")
        assert res.status_code == 400
        assert res.json()["error"] == "validation"

    def test_empty_cart(self, client):
        res = client.post("/api/v1/orders/", json={"table_id": TABLE_CODE, "items": []})
        assert res.status_code == 400

    def test_unavailable_item(self, client, menu_items):
        assert _place(client, menu_items, ("soup", 1)).status_code == 400

    def test_unknown_item(self, client):
        res = client.post("/api/v1/orders/", json={
            "table_id": TABLE_CODE, "items": [{"menu_item_id": 424242, "quantity": 1}],
        })
        assert res.status_code == 404
        assert res.json()["error"] == "not_found"

    def test_zero_quantity_is_a_request_error(self, client, menu_items):
        res = client.post("/api/v1/orders/", json={
            "table_id": TABLE_CODE, "items": [{"menu_item_id": menu_items["burger"].id, "quantity": 0}],
        })
        assert res.status_code == 422


class TestTrackOrder:
    def test_track_by_id(self, client, menu_items):
        order_id = _place(client, menu_items, ("fries", 1)).json()["id"]
        res = client.get(f"/api/v1/orders/{order_id}")
        assert res.status_code == 200
        assert res.json()["status"] == "pending"

    def test_missing_order(self, client):
        assert client.get("/api/v1/orders/99999").status_code == 404


class TestKitchenFlow:
    def test_full_lifecycle(self, client, menu_items, staff_headers):
        order_id = _place(client, menu_items, ("burger", 1)).json()["id"]
        for status in ("preparing", "ready", "delivered"):
            res = client.put(f"/api/v1/orders/{order_id}/status", json={"status": status}, headers=staff_headers)
            assert res.status_code == 200
            assert res.json()["status"] == status
        res = client.post(f"/api/v1/orders/{order_id}/pay", headers=staff_headers)
        assert res.status_code == 200
        assert res.json()["status"] == "paid"

    def test_illegal_transition_conflicts(self, client, menu_items, staff_headers):
        order_id = _place(client, menu_items, ("burger", 1)).json()["id"]
        res = client.put(f"/api/v1/orders/{order_id}/status", json={"status": "delivered"}, headers=staff_headers)
        assert res.status_code == 409
        assert res.json()["error"] == "conflict"

    def test_paid_order_cannot_be_paid_again(self, client, menu_items, staff_headers):
        order_id = _place(client, menu_items, ("burger", 1)).json()["id"]
        assert client.post(f"/api/v1/orders/{order_id}/pay", headers=staff_headers).status_code == 200
        assert client.post(f"/api/v1/orders/{order_id}/pay", headers=staff_headers).status_code == 409

    def test_status_change_requires_login(self, client, menu_items):
        order_id = _place(client, menu_items, ("burger", 1)).json()["id"]
        res = client.put(f"/api/v1/orders/{order_id}/status", json={"status": "preparing"})
        assert res.status_code == 401


class TestOrderBoards:
    def test_active_orders_newest_first(self, client, db_session, menu_items, staff_headers):
        first = _place(client, menu_items, ("burger", 1)).json()["id"]
        second = _place(client, menu_items, ("fries", 1)).json()["id"]
        done = _place(client, menu_items, ("fries", 2)).json()["id"]
        db_session.get(Order, first).created_at = utcnow() - timedelta(minutes=5)
        db_session.commit()
        client.post(f"/api/v1/orders/{done}/pay", headers=staff_headers)

        ids = [o["id"] for o in client.get("/api/v1/orders/active", headers=staff_headers).json()]
        assert ids == [second, first]

    def test_recent_orders_limited_to_ten(self, client, menu_items, staff_headers):
        for _ in range(12):
            _place(client, menu_items, ("fries", 1))
        assert len(client.get("/api/v1/orders/recent", headers=staff_headers).json()) == 10

    def test_history_search_and_range(self, client, db_session, menu_items, staff_headers):
        old = _place(client, menu_items, ("fries", 1), table="11/CS/001").json()["id"]
        _place(client, menu_items, ("fries", 1))
        db_session.get(Order, old).created_at = utcnow() - timedelta(days=40)
        db_session.commit()

        res = client.get("/api/v1/orders/history", params={"range": "month"}, headers=staff_headers)
        assert old not in [o["id"] for o in res.json()]

        res = client.get("/api/v1/orders/history", params={"search": "11/CS"}, headers=staff_headers)
        assert [o["id"] for o in res.json()] == [old]

        res = client.get("/api/v1/orders/history", params={"search": str(old)}, headers=staff_headers)
        assert old in [o["id"] for o in res.json()]

    def test_payments_lists_unsettled_orders(self, client, menu_items, staff_headers):
        pending = _place(client, menu_items, ("burger", 1)).json()["id"]
        paid = _place(client, menu_items, ("fries", 1)).json()["id"]
        client.post(f"/api/v1/orders/{paid}/pay", headers=staff_headers)
        ids = [o["id"] for o in client.get("/api/v1/orders/payments", headers=staff_headers).json()]
        assert pending in ids
        assert paid not in ids

    def test_totals_are_decimal_in_database(self, client, db_session, menu_items):
        order_id = _place(client, menu_items, ("burger", 2), ("fries", 1)).json()["id"]
        assert db_session.get(Order, order_id).total_amount == Decimal("35.97")


class TestOrderRetention:
    def test_orders_cannot_be_deleted(self, client, db_session, menu_items, auth_headers):
        order_id = _place(client, menu_items, ("burger", 1)).json()["id"]
        res = client.delete(f"/api/v1/orders/{order_id}", headers=auth_headers)
        assert res.status_code == 405
        assert db_session.get(Order, order_id) is not None
        assert client.get(f"/api/v1/orders/{order_id}").status_code == 200
