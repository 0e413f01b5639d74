"""Tests for reviews, the admin dashboard, sales reports and support links."""

from conftest import TABLE_CODE


def _review(client, rating, **extra):
    return client.post("/api/v1/reviews/", json={"name": "Guest", "rating": rating, **extra})


def _order(client, menu_items, *lines):
    return client.post("/api/v1/orders/", json={
        "table_id": TABLE_CODE,
        "items": [{"menu_item_id": menu_items[name].id, "quantity": qty} for name, qty in lines],
    }).json()


def _book(client, table_ids, menu_items, name="burger", quantity=1):
    return client.post("/api/v1/bookings/", json={
        "user_id": TABLE_CODE,
        "table_ids": table_ids,
        "items": [{"menu_item_id": menu_items[name].id, "quantity": quantity}],
    }).json()


class TestReviews:
    def test_submit_without_booking(self, client):
        res = _review(client, 5, review_text="Lovely biryani")
        assert res.status_code == 201
        assert res.json()["booking_id"] is None
        assert res.json()["user_id"] is None

    def test_submit_for_booking(self, client, dining_tables, menu_items):
        booking_id = _book(client, [dining_tables[0].id], menu_items)["bookings"][0]["id"]
        res = _review(client, 4, booking_id=booking_id)
        assert res.status_code == 201
        assert res.json()["booking_id"] == booking_id
        assert res.json()["user_id"] == TABLE_CODE

    def test_booking_customer_wins_over_sent_code(self, client, dining_tables, menu_items, staff_headers):
        booking_id = _book(client, [dining_tables[0].id], menu_items)["bookings"][0]["id"]
        res = _review(client, 5, booking_id=booking_id, user_id="99/CS/999")
        assert res.json()["user_id"] == TABLE_CODE

        listed = client.get("/api/v1/reviews/", params={"user_id": TABLE_CODE}, headers=staff_headers).json()
        assert [r["id"] for r in listed] == [res.json()["id"]]

    def test_code_without_booking(self, client):
        res = _review(client, 3, user_id="11/CS/001")
        assert res.status_code == 201
        assert res.json()["user_id"] == "11/CS/001"
        assert _review(client, 3, user_id="table-1").status_code == 400

    def test_unknown_booking(self, client):
        assert _review(client, 4, booking_id=777).status_code == 404

    def test_rating_out_of_range(self, client):
        assert _review(client, 6).status_code == 422
        assert _review(client, 0).status_code == 422

    def test_filter_and_stats(self, client, staff_headers):
        for rating in (5, 5, 4, 2):
            _review(client, rating)

        res = client.get("/api/v1/reviews/", params={"rating": 5}, headers=staff_headers)
        assert len(res.json()) == 2

        stats = client.get("/api/v1/reviews/stats", headers=staff_headers).json()
        assert stats["total_reviews"] == 4
        assert stats["average_rating"] == 4.0
        assert stats["distribution"] == {"1": 0, "2": 1, "3": 0, "4": 1, "5": 2}

    def test_delete_requires_manager(self, client, auth_headers, staff_headers):
        review_id = _review(client, 3).json()["id"]
        assert client.delete(f"/api/v1/reviews/{review_id}", headers=staff_headers).status_code == 403
        assert client.delete(f"/api/v1/reviews/{review_id}", headers=auth_headers).status_code == 204


class TestDashboard:
    def test_empty_dashboard(self, client, auth_headers):
        res = client.get("/api/v1/dashboard/", headers=auth_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["total_bookings"] == 0
        assert data["total_revenue"] == 0
        assert data["average_rating"] == 0
        assert data["popular_items"] == []
        assert len(data["monthly_revenue"]) == 12

    def test_dashboard_totals(self, client, dining_tables, menu_items, auth_headers):
        _book(client, [dining_tables[0].id, dining_tables[1].id], menu_items, name="fries", quantity=2)
        _book(client, [dining_tables[2].id], menu_items, name="burger", quantity=1)
        _review(client, 4)
        _review(client, 5)

        data = client.get("/api/v1/dashboard/", headers=auth_headers).json()
        assert data["total_bookings"] == 3
        # 2 x (9.00 * 1.18) + 12.99 * 1.18
        assert data["total_revenue"] == 36.57
        assert data["average_rating"] == 4.5
        assert data["occupied_tables"] == 3
        assert data["total_tables"] == 3
        assert len(data["recent_bookings"]) == 3
        assert data["popular_items"][0] == {"name": "Fries", "quantity": 4, "revenue": 18.0}
        assert data["monthly_revenue"][-1]["revenue"] == 36.57

    def test_requires_login(self, client):
        assert client.get("/api/v1/dashboard/").status_code == 401


class TestReports:
    def test_sales_report_today(self, client, menu_items, auth_headers):
        _order(client, menu_items, ("burger", 2), ("fries", 1))
        _order(client, menu_items, ("fries", 4))

        res = client.get("/api/v1/reports/sales", params={"range": "today"}, headers=auth_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["summary"]["total_orders"] == 2
        assert data["summary"]["status_counts"] == {"pending": 2}
        assert [i["name"] for i in data["top_items"]] == ["Burger", "Fries"]
        assert len(data["hourly"]) == 24
        assert sum(b["count"] for b in data["hourly"]) == 2

    def test_unknown_range(self, client, auth_headers):
        res = client.get("/api/v1/reports/sales", params={"range": "decade"}, headers=auth_headers)
        assert res.status_code == 422

    def test_revenue_periods(self, client, menu_items, auth_headers):
        _order(client, menu_items, ("burger", 1))
        for period, size in (("daily", 30), ("weekly", 12), ("monthly", 12)):
            res = client.get(f"/api/v1/reports/revenue/{period}", headers=auth_headers)
            assert res.status_code == 200
            buckets = res.json()
            assert len(buckets) == size
            assert buckets[-1]["revenue"] == 15.33

    def test_staff_cannot_see_reports(self, client, staff_headers):
        assert client.get("/api/v1/reports/sales", headers=staff_headers).status_code == 403


class TestSupportAndHealth:
    def test_whatsapp_link(self, client):
        data = client.get("/api/v1/support/whatsapp").json()
        assert data["url"].startswith(f"https://wa.me/{data['number']}?text=")
        assert " " not in data["url"]

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"
