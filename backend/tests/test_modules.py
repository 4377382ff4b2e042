"""
🎓 Test Suite for the Modules catalog
Covers listing, single retrieval, lessons, the public quiz view and grading.
"""

import random

import pytest
from fastapi.testclient import TestClient
from backend.main import app
from backend.authentication import utils as auth_utils
from backend.authentication.schemas import UserCreate
from backend.core.storage import new_object_id, utcnow
from backend.modules import schemas, seed, utils

client = TestClient(app)


# ---------------------------------------------------------------------
# 🧩 FIXTURES
# ---------------------------------------------------------------------
@pytest.fixture
def catalog():
    modules, quizzes = seed.build_catalog()
    hidden = modules[1].model_copy(update={"id": new_object_id(), "title": "Draft", "is_published": False})
    utils.save_catalog(modules + [hidden], quizzes)
    return {"cyber": modules[0], "fire": modules[1], "draft": hidden, "quizzes": quizzes}


@pytest.fixture
def student(auth_user):
    user = auth_utils.add_user(
        UserCreate(username="quiz_taker", email="quiz@example.com", password="secret123"), "x"
    )
    auth_user("student", user_id=user["id"], username="quiz_taker")
    return user


def correct_answers(quiz):
    return {q.id: sorted(q.correct_ids) for q in quiz.questions}


# ---------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------
def test_list_only_published_modules(catalog):
    response = client.get("/api/modules")
    assert response.status_code == 200
    data = response.json()["data"]
    titles = {m["title"] for m in data["modules"]}
    assert titles == {"Cyberbullying Awareness", "Fire Safety at School"}
    assert data["pagination"]["totalItems"] == 2
    assert "lessons" not in data["modules"][0]
    assert "lessonCount" in data["modules"][0]


def test_list_filters(catalog):
    by_category = client.get("/api/modules", params={"category": "online"}).json()["data"]
    assert [m["title"] for m in by_category["modules"]] == ["Cyberbullying Awareness"]

    by_search = client.get("/api/modules", params={"search": "evacuation"}).json()["data"]
    assert [m["title"] for m in by_search["modules"]] == ["Fire Safety at School"]

    assert client.get("/api/modules", params={"difficulty": "expert"}).status_code == 400


def test_get_module_and_lessons(catalog):
    cyber = catalog["cyber"]
    module = client.get(f"/api/modules/{cyber.id}").json()["data"]["module"]
    assert module["lessonCount"] == 3
    assert module["totalEstimatedTime"] == 60

    lessons = client.get(f"/api/modules/{cyber.id}/lessons").json()["data"]
    assert lessons["moduleTitle"] == "Cyberbullying Awareness"
    assert [lesson["order"] for lesson in lessons["lessons"]] == [1, 2, 3]


def test_unpublished_and_malformed_modules(catalog):
    assert client.get(f"/api/modules/{catalog['draft'].id}").status_code == 404
    assert client.get("/api/modules/xyz").status_code == 400


# ---------------------------------------------------------------------
# Quizzes
# ---------------------------------------------------------------------
def test_public_quiz_hides_answers(catalog):
    response = client.get(f"/api/modules/{catalog['cyber'].id}/quiz")
    assert response.status_code == 200
    quiz = response.json()["data"]["quiz"]
    assert quiz["questionCount"] == 3
    assert quiz["totalPoints"] == 5
    for question in quiz["questions"]:
        assert "explanation" not in question
        for option in question["options"]:
            assert set(option) == {"id", "text"}


def test_public_quiz_shuffles_options_only_when_asked(catalog):
    quiz = catalog["quizzes"][0]
    plain = utils.public_quiz(quiz.model_copy(update={"randomize_options": False}))
    assert [q.order for q in plain.questions] == [1, 2, 3]
    assert [o.id for o in plain.questions[0].options] == [o.id for o in quiz.questions[0].options]

    shuffled = utils.public_quiz(quiz, rng=random.Random(3))
    for before, after in zip(quiz.questions, shuffled.questions):
        assert sorted(o.id for o in before.options) == sorted(o.id for o in after.options)


def test_quiz_rules_are_enforced():
    now = utcnow()
    with pytest.raises(ValueError):
        schemas.Question(id="q", question_text="?", order=1,
                         options=[schemas.Option(id="o1", text="only", is_correct=True)])
    with pytest.raises(ValueError):
        schemas.Question(id="q", question_text="?", order=1, type="single-choice",
                         options=[schemas.Option(id="o1", text="a", is_correct=True),
                                  schemas.Option(id="o2", text="b", is_correct=True)])
    with pytest.raises(ValueError):
        schemas.Quiz(id="z", title="Empty", module="m", questions=[], created_at=now, updated_at=now)


def test_submit_perfect_quiz_awards_points(catalog, student):
    quiz = catalog["quizzes"][0]
    response = client.post(
        f"/api/modules/{catalog['cyber'].id}/quiz/submit", json={"answers": correct_answers(quiz)}
    )
    assert response.status_code == 200
    result = response.json()["data"]
    assert result["score"] == 5
    assert result["percentage"] == 100.0
    assert result["passed"] is True
    assert auth_utils.get_user_by_id(student["id"])["points"] == 5


def test_partial_multiple_choice_earns_nothing(catalog, student):
    quiz = catalog["quizzes"][0]
    answers = correct_answers(quiz)
    multi = next(q for q in quiz.questions if q.type == schemas.QuestionType.multiple_choice)
    answers[multi.id] = answers[multi.id][:1]

    result = client.post(f"/api/modules/{catalog['cyber'].id}/quiz/submit", json={"answers": answers})
    data = result.json()["data"]
    assert data["score"] == 3
    assert data["percentage"] == 60.0
    assert data["passed"] is False
    assert result.json()["message"] == "Quiz not passed"
    assert auth_utils.get_user_by_id(student["id"])["points"] == 3


def test_submit_unknown_question(catalog, student):
    response = client.post(
        f"/api/modules/{catalog['cyber'].id}/quiz/submit", json={"answers": {"bogus": []}}
    )
    assert response.status_code == 400


def test_submit_requires_auth(catalog):
    response = client.post(f"/api/modules/{catalog['cyber'].id}/quiz/submit", json={"answers": {}})
    assert response.status_code == 401
