from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from userhub.app import create_application
from userhub.exceptions import ConfigurationError

ANA = ("ana@example.com", "ana-secret")
BOB = ("bob@example.com", "bob-secret")


@pytest.fixture
def client(environ):
    app = create_application(environ)
    with TestClient(app) as test_client:
        yield test_client


def _register(client: TestClient, credentials, **extra) -> dict:
    email, password = credentials
    response = client.post("/users", json={"email": email, "password": password, **extra})
    assert response.status_code == 201, response.text
    return response.json()


def test_invalid_environment_prevents_startup(environ):
    environ.pop("INFLUXDB_TOKEN")

    with pytest.raises(ConfigurationError):
        create_application(environ)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_register_returns_common_user_without_password(client):
    body = _register(client, ANA, role="admin", name="Ana")

    assert body["email"] == ANA[0]
    assert body["name"] == "Ana"
    assert body["role"] == "common"
    assert "password" not in body


def test_register_twice_is_rejected(client):
    _register(client, ANA)

    response = client.post("/users", json={"email": ANA[0], "password": "different"})

    assert response.status_code == 400
    assert response.json()["detail"] == "An user with this email was already registered"


def test_register_validates_payload(client):
    response = client.post("/users", json={"email": "not-an-email", "password": "x"})

    assert response.status_code == 422


def test_me_requires_credentials(client):
    response = client.get("/users/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Basic"


def test_me_rejects_wrong_password(client):
    _register(client, ANA)

    assert client.get("/users/me", auth=(ANA[0], "wrong")).status_code == 401


def test_me_returns_requester(client):
    ana = _register(client, ANA)
    _register(client, BOB)

    response = client.get("/users/me", auth=ANA)

    assert response.status_code == 200
    assert response.json()["id"] == ana["id"]


def test_get_own_user(client):
    ana = _register(client, ANA)

    response = client.get(f"/users/{ana['id']}", auth=ANA)

    assert response.status_code == 200
    assert response.json()["email"] == ANA[0]


def test_get_other_user_is_forbidden(client):
    _register(client, ANA)
    bob = _register(client, BOB)

    response = client.get(f"/users/{bob['id']}", auth=ANA)

    assert response.status_code == 403
    assert BOB[0] not in response.text


def test_get_user_anonymously_is_forbidden(client):
    ana = _register(client, ANA)

    assert client.get(f"/users/{ana['id']}").status_code == 403


def test_list_with_other_users_is_forbidden(client):
    _register(client, ANA)
    _register(client, BOB)

    assert client.get("/users", auth=ANA).status_code == 403


def test_list_filtered_to_self(client):
    ana = _register(client, ANA)
    _register(client, BOB)

    response = client.get("/users", params={"filter": f"id||$eq||{ana['id']}"}, auth=ANA)

    assert response.status_code == 200
    assert [user["id"] for user in response.json()] == [ana["id"]]


def test_list_paged_response(client):
    ana = _register(client, ANA)
    _register(client, BOB)

    response = client.get(
        "/users",
        params={"filter": f"email||$eq||{ANA[0]}", "limit": 10, "page": 1},
        auth=ANA,
    )

    assert response.status_code == 200
    body = response.json()
    assert [user["id"] for user in body["data"]] == [ana["id"]]
    assert (body["count"], body["total"], body["page"], body["pageCount"]) == (1, 1, 1, 1)


@pytest.mark.parametrize(
    "params",
    [
        {"filter": "id||$like||1"},
        {"filter": "password||$eq||x"},
        {"sort": "email,SIDEWAYS"},
        {"filter": "id||$eq||abc"},
        {"filter": "id||$cont||1"},
        {"page": 2},
    ],
)
def test_malformed_query_is_rejected(client, params):
    _register(client, ANA)

    assert client.get("/users", params=params, auth=ANA).status_code == 400
