"""
Tests for authentication endpoints: register, login, logout, and the
current-user (/auth/me) lookup.
"""

import time

from fastapi.testclient import TestClient
from backend.main import app
from backend.authentication import utils as auth_utils
from backend.core.storage import load_json

client = TestClient(app)


def register(username="john_doe", email="john@example.com", password="secret123", role=None):
    payload = {"username": username, "email": email, "password": password}
    if role:
        payload["role"] = role
    return client.post("/api/auth/register", json=payload)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


# 🧩 --- Tests -----------------------------------------------------------------

def test_register_success():
    """POST /api/auth/register → Creates a student with zero points."""
    response = register()
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    user = body["data"]["user"]
    assert user["username"] == "john_doe"
    assert user["role"] == "student"
    assert user["points"] == 0
    assert "hashedPassword" not in user and "hashed_password" not in user
    assert body["data"]["token"]


def test_register_duplicate_username():
    """POST /api/auth/register → Fails if username already exists."""
    register(username="duplicate", email="first@example.com")
    response = register(username="duplicate", email="second@example.com")
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "Username" in response.json()["message"]


def test_register_duplicate_email_is_case_insensitive():
    register(username="first", email="same@example.com")
    response = register(username="second", email="SAME@example.com")
    assert response.status_code == 400
    assert "Email" in response.json()["message"]


def test_register_rejects_admin_role_and_short_password():
    """Every violated field is reported, not just the first."""
    response = register(username="x", password="123", role="admin")
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert len(errors) == 3
    assert any(e.startswith("username") for e in errors)
    assert any(e.startswith("password") for e in errors)
    assert any(e.startswith("role") for e in errors)


def test_login_with_username_or_email():
    """POST /api/auth/login → accepts either identifier."""
    register(username="alice", email="alice@example.com", password="StrongPass1")

    by_name = client.post("/api/auth/login", json={"identifier": "alice", "password": "StrongPass1"})
    by_email = client.post("/api/auth/login", json={"identifier": "Alice@Example.com", "password": "StrongPass1"})

    assert by_name.status_code == 200
    assert by_email.status_code == 200
    assert by_name.json()["data"]["user"]["username"] == "alice"


def test_login_invalid_credentials():
    """POST /api/auth/login → Rejects invalid password."""
    register(username="bob", email="bob@example.com", password="GoodPass1")
    response = client.post("/api/auth/login", json={"identifier": "bob", "password": "WrongPass"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_me_returns_profile():
    """GET /api/auth/me → Returns the caller's profile."""
    token = register(username="carol", email="carol@example.com", role="teacher").json()["data"]["token"]
    response = client.get("/api/auth/me", headers=bearer(token))
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "teacher"


def test_missing_or_garbage_token_is_401():
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers=bearer("not-a-jwt")).status_code == 401


def test_logout_revokes_token():
    """POST /api/auth/logout → token stops working afterwards."""
    token = register(username="david", email="david@example.com").json()["data"]["token"]

    logout = client.post("/api/auth/logout", headers=bearer(token))
    assert logout.status_code == 200
    assert "revoked" in logout.json()["message"].lower()

    assert client.get("/api/auth/me", headers=bearer(token)).status_code == 401


def test_revoked_list_drops_expired_tokens():
    """Expired entries are pruned whenever another token is revoked."""
    past = int(time.time()) - 60
    future = int(time.time()) + 3600
    auth_utils.revoke_token("stale-token", past)
    auth_utils.revoke_token("live-token", future)

    assert not auth_utils.is_token_revoked("stale-token")
    assert auth_utils.is_token_revoked("live-token")
    assert [e["token"] for e in load_json(auth_utils.REVOKED_TOKENS_FILE)] == ["live-token"]


def test_logout_records_token_expiry():
    token = register(username="erin", email="erin@example.com").json()["data"]["token"]
    client.post("/api/auth/logout", headers=bearer(token))

    entry = load_json(auth_utils.REVOKED_TOKENS_FILE)[0]
    assert entry["token"] == token
    assert entry["exp"] > time.time()
