import pytest

from tests.fixtures_data import CUSTOMER_PAYLOAD, WIDGET_PAYLOAD, sale_payload


@pytest.fixture
def seeded(client, owner, other_owner):
    """One item, customer, sale, notification and report in each of two businesses."""
    records = {}
    for label, account in (("mine", owner), ("theirs", other_owner)):
        headers = account["headers"]
        item = client.post("/api/inventory", json=WIDGET_PAYLOAD, headers=headers).json()
        customer = client.post("/api/customers", json=CUSTOMER_PAYLOAD, headers=headers).json()
        sale = client.post("/api/sales", json=sale_payload(item["id"]), headers=headers).json()
        notification = client.post("/api/notifications", json={"title": f"hello {label}"}, headers=headers).json()
        client.post("/api/reports", json={"name": f"{label} sales", "type": "sales"}, headers=headers)
        records[label] = {"item": item, "customer": customer, "sale": sale, "notification": notification}
    return records


@pytest.mark.parametrize("path", ["/api/inventory", "/api/customers", "/api/sales", "/api/notifications", "/api/reports"])
def test_lists_only_contain_own_business_records(client, owner, seeded, path):
    response = client.get(path, headers=owner["headers"])

    assert response.status_code == 200
    assert response.json()
    assert {entry["businessId"] for entry in response.json()} == {owner["user"]["businessId"]}


def test_reading_another_business_record_is_not_found(client, owner, seeded):
    theirs = seeded["theirs"]

    assert client.get(f"/api/inventory/{theirs['item']['id']}", headers=owner["headers"]).status_code == 404
    assert client.get(f"/api/customers/{theirs['customer']['id']}", headers=owner["headers"]).status_code == 404
    assert client.get(f"/api/sales/{theirs['sale']['id']}", headers=owner["headers"]).status_code == 404


def test_mutating_another_business_record_is_not_found(client, owner, other_owner, seeded):
    theirs = seeded["theirs"]

    update = client.put(f"/api/inventory/{theirs['item']['id']}", json={"quantity": 0}, headers=owner["headers"])
    delete = client.delete(f"/api/inventory/{theirs['item']['id']}", headers=owner["headers"])
    customer = client.put(f"/api/customers/{theirs['customer']['id']}", json={"isVip": True}, headers=owner["headers"])
    read = client.put(f"/api/notifications/{theirs['notification']['id']}/read", headers=owner["headers"])

    assert update.status_code == 404
    assert update.json() == {"error": "Item not found"}
    assert delete.status_code == 404
    assert customer.status_code == 404
    assert read.status_code == 404

    untouched = client.get(f"/api/inventory/{theirs['item']['id']}", headers=other_owner["headers"]).json()
    assert untouched["quantity"] == 7


def test_sale_cannot_draw_stock_from_another_business(client, owner, seeded):
    theirs = seeded["theirs"]

    response = client.post("/api/sales", json=sale_payload(theirs["item"]["id"]), headers=owner["headers"])

    assert response.status_code == 404
    assert response.json() == {"error": "Inventory item not found"}


def test_sale_cannot_reference_another_business_customer(client, owner, seeded):
    mine = seeded["mine"]
    theirs = seeded["theirs"]

    response = client.post(
        "/api/sales",
        json=sale_payload(mine["item"]["id"], customerId=theirs["customer"]["id"]),
        headers=owner["headers"],
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Customer not found"}


def test_users_of_another_business_are_not_found(client, owner, other_owner):
    their_id = other_owner["user"]["id"]

    assert client.get(f"/api/users/{their_id}", headers=owner["headers"]).status_code == 404
    assert client.delete(f"/api/users/{their_id}", headers=owner["headers"]).status_code == 404
    listed = client.get("/api/users", headers=owner["headers"]).json()["users"]
    assert [user["id"] for user in listed] == [owner["user"]["id"]]
