"""
Tests for /users routes: the public leaderboard and the personal dashboard.
"""

import pytest
from fastapi.testclient import TestClient
from backend.main import app
from backend.authentication import utils as auth_utils
from backend.authentication.schemas import UserCreate
from backend.core.config import settings
from backend.core.exceptions import ValidationError
from backend.reports import utils as report_utils

client = TestClient(app)


def make_user(username, points=0, role="student"):
    user = auth_utils.add_user(
        UserCreate(username=username, email=f"{username}@example.com", password="secret123", role=role), "x"
    )
    if points:
        user = auth_utils.add_points(user["id"], points)
    return user


def test_leaderboard_ranks_by_points():
    """GET /api/users/leaderboard → highest points first, rank from 1."""
    make_user("low", 5)
    make_user("top", 50)
    make_user("mid", 20, role="teacher")

    response = client.get("/api/users/leaderboard")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert [(u["username"], u["rank"]) for u in body["data"]] == [("top", 1), ("mid", 2), ("low", 3)]
    assert "email" not in body["data"][0]


def test_leaderboard_limit_and_ties():
    make_user("bravo", 10)
    make_user("alpha", 10)
    make_user("charlie", 1)

    data = client.get("/api/users/leaderboard", params={"limit": 2}).json()["data"]
    assert [u["username"] for u in data] == ["alpha", "bravo"]


def test_leaderboard_rejects_bad_limit():
    assert client.get("/api/users/leaderboard", params={"limit": 0}).status_code == 400
    too_many = settings.MAX_PAGE_SIZE + 1
    assert client.get("/api/users/leaderboard", params={"limit": too_many}).status_code == 400
    assert client.get("/api/users/leaderboard", params={"limit": settings.MAX_PAGE_SIZE}).status_code == 200


def test_points_never_negative():
    user = make_user("spender", 3)
    with pytest.raises(ValidationError):
        auth_utils.add_points(user["id"], -10)
    assert auth_utils.get_user_by_id(user["id"])["points"] == 3


def test_dashboard_counts_own_activity(auth_user):
    user = make_user("dana", 7)
    identity = auth_user("student", user_id=user["id"], username="dana")
    report_utils.create_report(
        {"title": "Leak", "description": "Roof leak", "location": "Hall", "category": "Infrastructure"}, identity
    )

    response = client.get("/api/users/dashboard")
    assert response.status_code == 200
    stats = response.json()["data"]["stats"]
    assert stats == {"points": 7, "rank": 1, "reportsFiled": 1, "reportsResolved": 0, "storiesShared": 0}


def test_dashboard_requires_auth():
    assert client.get("/api/users/dashboard").status_code == 401
