from tests.fixtures_data import REGISTRATION_PAYLOAD


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, **overrides):
    payload = {**REGISTRATION_PAYLOAD, **overrides}
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def add_staff(client, owner_headers, *, email, role, password="password1"):
    response = client.post(
        "/api/users",
        json={"email": email, "password": password, "firstName": "Staff", "lastName": role.title(), "role": role},
        headers=owner_headers,
    )
    assert response.status_code == 201, response.text
    login = client.post("/api/auth/login", json={"email": email, "password": password})
    assert login.status_code == 200, login.text
    return {"user": response.json()["user"], "headers": auth_headers(login.json()["token"])}
