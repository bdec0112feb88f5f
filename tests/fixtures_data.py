"""Reusable payloads for backend test scenarios."""

REGISTRATION_PAYLOAD = {
    "email": "a@x.com",
    "password": "password1",
    "firstName": "A",
    "lastName": "B",
    "businessName": "Shop",
    "subdomain": "shop-1",
}

WIDGET_PAYLOAD = {
    "name": "Widget",
    "sku": "W1",
    "price": "9.99",
    "cost": "5",
    "quantity": "10",
    "reorderPoint": "2",
}

CUSTOMER_PAYLOAD = {
    "name": "Jane Doe",
    "email": "jane@shopmail.com",
    "phone": "555-0100",
}

WRONG_CREDENTIALS = {
    "expected_status_code": 401,
    "expected_error": "Invalid credentials",
}


def sale_payload(item_id, quantity=3, price=9.99, total=29.97, **extra):
    return {
        "items": [{"id": item_id, "name": "Widget", "quantity": quantity, "price": price}],
        "total": total,
        "paymentMethod": "cash",
        **extra,
    }
