from fastapi.testclient import TestClient

from app.services.user_service import UserDirectory

API_PREFIX = "/api/v1/users"


def test_register_user(client: TestClient, users: UserDirectory):
    response = client.post(API_PREFIX + "/", json={
        "name": "Anita Desai",
        "email": "Anita@Example.com",
        "role": "ngo"
    })
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "anita@example.com"
    assert body["role"] == "ngo"
    assert body["id"].startswith("user-")
    assert users.get(body["id"]).can_manage_issues


def test_register_defaults_to_citizen(client: TestClient):
    response = client.post(API_PREFIX + "/", json={"name": "Ravi", "email": "ravi@example.com"})
    assert response.json()["role"] == "citizen"


def test_register_duplicate_email(client: TestClient):
    response = client.post(API_PREFIX + "/", json={"name": "Priya", "email": "PRIYA@example.com"})
    assert response.status_code == 409


def test_register_rejects_unknown_role(client: TestClient):
    response = client.post(API_PREFIX + "/", json={"name": "X", "email": "x@example.com", "role": "mayor"})
    assert response.status_code == 422


def test_get_user(client: TestClient):
    response = client.get(API_PREFIX + "/4")
    assert response.status_code == 200
    assert response.json()["role"] == "authority"

    assert client.get(API_PREFIX + "/nobody").status_code == 404
