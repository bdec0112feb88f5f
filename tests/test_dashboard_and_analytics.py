from datetime import datetime, timedelta, timezone

import pytest

from smartops.services.analytics import _month_start

from tests.fixtures_data import CUSTOMER_PAYLOAD, WIDGET_PAYLOAD, sale_payload
from tests.helpers import add_staff



def _seed_activity(client, headers):
    item = client.post("/api/inventory", json=WIDGET_PAYLOAD, headers=headers).json()
    client.post("/api/inventory", json={**WIDGET_PAYLOAD, "name": "Bolt", "sku": "B1", "quantity": 1}, headers=headers)
    client.post("/api/customers", json={**CUSTOMER_PAYLOAD, "isVip": True}, headers=headers)
    client.post("/api/sales", json=sale_payload(item["id"]), headers=headers)
    client.post("/api/sales", json=sale_payload(item["id"], quantity=1, total=9.99), headers=headers)
    client.post("/api/notifications", json={"title": "Low stock", "priority": "high"}, headers=headers)
    return item


def test_dashboard_stats(client, owner):
    item = _seed_activity(client, owner["headers"])

    response = client.get("/api/dashboard/stats", headers=owner["headers"])

    assert response.status_code == 200
    stats = response.json()
    assert stats["totalRevenue"] == pytest.approx(39.96)
    assert stats["totalSales"] == 2
    assert stats["totalProducts"] == 2
    assert stats["totalCustomers"] == 1
    assert stats["lowStockItems"] == 1
    assert stats["unreadNotifications"] == 1
    assert len(stats["recentSales"]) == 2
    assert stats["recentSales"][0]["total"] == 9.99
    assert stats["topProducts"][0]["id"] == item["id"]
    assert stats["topProducts"][0]["soldCount"] == 4


def test_dashboard_is_empty_for_a_new_business(client, owner, other_owner):
    _seed_activity(client, owner["headers"])

    stats = client.get("/api/dashboard/stats", headers=other_owner["headers"]).json()

    assert stats["totalRevenue"] == 0
    assert stats["totalSales"] == 0
    assert stats["recentSales"] == []
    assert stats["topProducts"] == []


def test_analytics_summary(client, owner):
    _seed_activity(client, owner["headers"])

    response = client.get("/api/analytics", headers=owner["headers"])

    assert response.status_code == 200
    summary = response.json()
    assert summary["revenue"] == {"total": pytest.approx(39.96), "monthly": pytest.approx(39.96)}
    assert summary["sales"] == {"total": 2, "monthly": 2}
    assert summary["products"] == {"total": 2, "lowStock": 1}
    assert summary["customers"] == {"total": 1, "vip": 1}


def test_month_start_is_aware_utc_by_default():
    start = _month_start(datetime(2024, 3, 17, 22, 5, tzinfo=timezone.utc))

    assert start == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert start.tzinfo is not None


def test_month_start_converts_other_offsets_to_utc():
    # 21:30 on Mar 31 in UTC-5 is already April in UTC
    eastern = timezone(timedelta(hours=-5))

    assert _month_start(datetime(2024, 3, 31, 21, 30, tzinfo=eastern)) == datetime(2024, 4, 1, tzinfo=timezone.utc)


def test_month_start_naive_for_sqlite_columns():
    assert _month_start(datetime(2024, 3, 17, tzinfo=timezone.utc), naive=True) == datetime(2024, 3, 1)


def test_notifications_unread_filter_and_mark_read(client, owner):
    first = client.post("/api/notifications", json={"title": "One"}, headers=owner["headers"]).json()
    client.post("/api/notifications", json={"title": "Two", "type": "warning"}, headers=owner["headers"])

    read = client.put(f"/api/notifications/{first['id']}/read", headers=owner["headers"])
    unread = client.get("/api/notifications", params={"unread": "true"}, headers=owner["headers"]).json()

    assert read.json()["isRead"] is True
    assert [entry["title"] for entry in unread] == ["Two"]
    assert first["priority"] == "medium"


def test_notification_priority_is_validated(client, owner):
    response = client.post("/api/notifications", json={"title": "x", "priority": "urgent"}, headers=owner["headers"])

    assert response.status_code == 400


def test_reports_are_requested_by_owner_or_manager(client, owner):
    cashier = add_staff(client, owner["headers"], email="c@x.com", role="cashier")
    body = {"name": "March sales", "type": "sales", "dateRange": {"from": "2024-03-01", "to": "2024-03-31"}, "format": "pdf"}

    created = client.post("/api/reports", json=body, headers=owner["headers"])
    denied = client.post("/api/reports", json=body, headers=cashier["headers"])

    assert created.status_code == 201
    assert created.json()["status"] == "generating"
    assert created.json()["dateRange"] == {"from": "2024-03-01", "to": "2024-03-31"}
    assert denied.status_code == 403
    assert len(client.get("/api/reports", headers=cashier["headers"]).json()) == 1


def test_tenant_metrics_are_owner_only(client, owner):
    cashier = add_staff(client, owner["headers"], email="c@x.com", role="cashier")
    client.get("/api/inventory", headers=owner["headers"])

    response = client.get("/internal/metrics/tenants", headers=owner["headers"])

    assert response.status_code == 200
    body = response.json()
    assert body["businessId"] == owner["user"]["businessId"]
    assert body["metrics"]["requests"] >= 1
    assert client.get("/internal/metrics/tenants", headers=cashier["headers"]).status_code == 403
