import uuid

import pytest

from conftest import auth_header, create_random_user, random_email
from whalewake.core.logger import logger
from whalewake.models.user import ADMIN_ROLE, STANDARD_USER_ROLE


def _register(client, **overrides):
    body = {
        "username": "alice",
        "email": "a@x.com",
        "password": "secret12",
        "first_name": "Alice",
        "last_name": "Liddell",
        "city": "Oxford",
        "country_code": "GB",
    }
    body.update(overrides)
    return client.post("/users", json=body)


def _login(client, email="a@x.com", password="secret12"):
    return client.post("/users/login", json={"email": email, "password": password})


@pytest.fixture
def admin_headers(app_store, make_token):
    admin = create_random_user(app_store, role_id=ADMIN_ROLE)
    return auth_header(make_token(admin.user.id, ADMIN_ROLE))


# =====================================================
# REGISTER / LOGIN
# =====================================================

def test_ping(client):
    assert client.get("/ping").json() == {"status": "ok"}


def test_register_user(client):
    r = _register(client)

    assert r.status_code == 200
    body = r.json()
    assert body["username"] == "alice"
    assert body["email"] == "a@x.com"
    assert body["first_name"] == "Alice"
    assert body["country_code"] == "GB"
    assert body["business_name"] is None
    assert body["role_id"] == STANDARD_USER_ROLE
    assert "password" not in body
    uuid.UUID(body["id"])


def test_register_duplicate_email(client, app_store):
    assert _register(client).status_code == 200

    r = _register(client, username="alice2")
    assert r.status_code == 409

    users = app_store.exec_tx(lambda q: q.list_users(limit=10, offset=0))
    assert len(users) == 1


@pytest.mark.parametrize("overrides", [
    {"email": "not-an-email"},
    {"password": "short"},
    {"password": "x" * 33},
    {"username": ""},
])
def test_register_invalid_input(client, overrides):
    r = _register(client, **overrides)
    assert r.status_code == 400


def test_register_ignores_role_in_body(client):
    r = _register(client, role_id=ADMIN_ROLE)
    assert r.status_code == 200
    assert r.json()["role_id"] == STANDARD_USER_ROLE


def test_login(client, app_token_maker):
    user_id = _register(client).json()["id"]

    r = _login(client)
    assert r.status_code == 200
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["id"] == user_id
    assert body["user"]["email"] == "a@x.com"

    payload = app_token_maker.verify_token(body["access_token"])
    assert str(payload.account_id) == user_id
    assert payload.role_id == STANDARD_USER_ROLE


def test_login_wrong_password(client):
    _register(client)
    assert _login(client, password="wrongpass").status_code == 401


def test_login_unknown_email(client):
    assert _login(client, email=random_email()).status_code == 401


def test_refresh_token(client, app_token_maker):
    _register(client)
    token = _login(client).json()["access_token"]

    r = client.post("/users/token/refresh", json={"access_token": token})
    assert r.status_code == 200

    old = app_token_maker.verify_token(token)
    new = app_token_maker.verify_token(r.json()["access_token"])
    assert new.id != old.id
    assert new.account_id == old.account_id
    assert new.role_id == old.role_id


def test_refresh_invalid_token(client):
    r = client.post("/users/token/refresh", json={"access_token": "garbage"})
    assert r.status_code == 401


# =====================================================
# GET
# =====================================================

def test_get_self(client):
    user_id = _register(client).json()["id"]
    token = _login(client).json()["access_token"]

    r = client.get(f"/users/{user_id}", headers=auth_header(token))
    assert r.status_code == 200
    assert r.json()["id"] == user_id
    assert r.json()["first_name"] == "Alice"


def test_get_other_user_forbidden(client, app_store, make_token):
    other = create_random_user(app_store)
    me = create_random_user(app_store)

    r = client.get(
        f"/users/{other.user.id}",
        headers=auth_header(make_token(me.user.id, STANDARD_USER_ROLE)),
    )
    assert r.status_code == 403


def test_admin_gets_any_user(client, app_store, admin_headers):
    other = create_random_user(app_store)

    r = client.get(f"/users/{other.user.id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["email"] == other.user.email


def test_get_missing_user(client, admin_headers):
    assert client.get(f"/users/{uuid.uuid4()}", headers=admin_headers).status_code == 404


def test_get_requires_token(client):
    assert client.get(f"/users/{uuid.uuid4()}").status_code == 401


def test_get_bad_id(client, admin_headers):
    assert client.get("/users/not-a-uuid", headers=admin_headers).status_code == 400


# =====================================================
# LIST
# =====================================================

def test_list_users_admin_only(client, app_store, make_token, admin_headers):
    me = create_random_user(app_store)
    for _ in range(3):
        create_random_user(app_store)

    r = client.get(
        "/users",
        params={"page_id": 1, "page_size": 10},
        headers=auth_header(make_token(me.user.id)),
    )
    assert r.status_code == 403

    r = client.get("/users", params={"page_id": 1, "page_size": 2}, headers=admin_headers)
    assert r.status_code == 200
    assert len(r.json()) == 2

    r = client.get("/users", params={"page_id": 3, "page_size": 2}, headers=admin_headers)
    assert r.status_code == 200
    assert len(r.json()) == 1


def test_list_users_bad_paging(client, admin_headers):
    r = client.get("/users", params={"page_id": 0, "page_size": 5}, headers=admin_headers)
    assert r.status_code == 400


# =====================================================
# UPDATE
# =====================================================

def test_update_self(client):
    user_id = _register(client).json()["id"]
    token = _login(client).json()["access_token"]

    r = client.put(
        f"/users/{user_id}",
        json={"city": "London", "password": "newsecret1"},
        headers=auth_header(token),
    )
    assert r.status_code == 200
    assert r.json()["city"] == "London"
    assert r.json()["first_name"] == "Alice"

    assert _login(client, password="newsecret1").status_code == 200
    assert _login(client, password="secret12").status_code == 401


def test_user_cannot_change_own_role(client):
    user_id = _register(client).json()["id"]
    token = _login(client).json()["access_token"]

    r = client.put(f"/users/{user_id}", json={"role_id": ADMIN_ROLE}, headers=auth_header(token))
    assert r.status_code == 403


def test_user_may_repeat_own_role(client):
    user_id = _register(client).json()["id"]
    token = _login(client).json()["access_token"]

    r = client.put(
        f"/users/{user_id}",
        json={"role_id": STANDARD_USER_ROLE, "city": "Bath"},
        headers=auth_header(token),
    )
    assert r.status_code == 200
    assert r.json()["role_id"] == STANDARD_USER_ROLE
    assert r.json()["city"] == "Bath"


def test_update_without_fields(client):
    user_id = _register(client).json()["id"]
    token = _login(client).json()["access_token"]

    r = client.put(f"/users/{user_id}", json={}, headers=auth_header(token))
    assert r.status_code == 400
    assert r.json() == {"detail": "no fields to update"}


def test_update_other_user_forbidden(client, app_store, make_token):
    other = create_random_user(app_store)
    me = create_random_user(app_store)

    r = client.put(
        f"/users/{other.user.id}",
        json={"city": "Nowhere"},
        headers=auth_header(make_token(me.user.id)),
    )
    assert r.status_code == 403


def test_admin_changes_role(client, app_store, admin_headers):
    other = create_random_user(app_store)

    r = client.put(f"/users/{other.user.id}", json={"role_id": ADMIN_ROLE}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["role_id"] == ADMIN_ROLE


def test_update_to_taken_email(client, app_store, make_token):
    first = create_random_user(app_store)
    second = create_random_user(app_store)

    r = client.put(
        f"/users/{second.user.id}",
        json={"email": first.user.email},
        headers=auth_header(make_token(second.user.id)),
    )
    assert r.status_code == 409


# =====================================================
# DELETE
# =====================================================

def test_delete_requires_admin(client):
    user_id = _register(client).json()["id"]
    token = _login(client).json()["access_token"]

    r = client.delete(f"/users/{user_id}", headers=auth_header(token))
    assert r.status_code == 403


def test_admin_deletes_user(client, app_store, admin_headers):
    other = create_random_user(app_store)

    r = client.delete(f"/users/{other.user.id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["id"] == str(other.user.id)

    assert client.get(f"/users/{other.user.id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/users/{other.user.id}", headers=admin_headers).status_code == 404


# =====================================================
# REQUEST LOG
# =====================================================

def test_request_log_names_the_caller(client, app_store, make_token, monkeypatch):
    me = create_random_user(app_store)
    lines = []
    monkeypatch.setattr(logger, "info", lines.append)

    client.get(f"/users/{me.user.id}", headers=auth_header(make_token(me.user.id)))
    client.get("/ping")

    requests = [line for line in lines if line.startswith("REQUEST")]
    assert requests[0] == (
        f"REQUEST | GET /users/{me.user.id} | status=200 | account_id={me.user.id}"
    )
    assert requests[1] == "REQUEST | GET /ping | status=200 | account_id=-"
