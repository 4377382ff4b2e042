"""
Test configuration: settings are read at import time, so the environment is
prepared before anything under ``backend`` is imported.
"""

import os
import tempfile

os.environ["ENVIRONMENT"] = "testing"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="edusafe-test-"))

import pytest

from backend.main import app
from backend.authentication import utils as auth_utils
from backend.authentication.schemas import TokenData
from backend.authentication.security import get_current_user
from backend.reports import utils as report_utils
from backend.stories import utils as story_utils
from backend.modules import utils as module_utils


@pytest.fixture(autouse=True)
def isolated_data(tmp_path, monkeypatch):
    """Point every collection at a fresh temporary directory."""
    monkeypatch.setattr(auth_utils, "USERS_FILE", str(tmp_path / "users" / "users.json"))
    monkeypatch.setattr(auth_utils, "REVOKED_TOKENS_FILE", str(tmp_path / "users" / "revoked.json"))
    monkeypatch.setattr(report_utils, "REPORTS_FILE", str(tmp_path / "reports" / "reports.json"))
    monkeypatch.setattr(story_utils, "STORIES_FILE", str(tmp_path / "stories" / "stories.json"))
    monkeypatch.setattr(module_utils, "MODULES_FILE", str(tmp_path / "modules" / "modules.json"))
    monkeypatch.setattr(module_utils, "QUIZZES_FILE", str(tmp_path / "modules" / "quizzes.json"))
    yield tmp_path


@pytest.fixture
def auth_user():
    """
    Override FastAPI's get_current_user dependency at the app level.
    Usage: auth_user("student", user_id=...) or auth_user("teacher")
    """
    def _set_user(role="student", user_id="aaaaaaaaaaaaaaaaaaaaaaaa", username=None):
        identity = TokenData(user_id=user_id, username=username or f"{role}_user", role=role)
        app.dependency_overrides[get_current_user] = lambda: identity
        return identity

    yield _set_user
    # Remove overrides so tests don't leak state
    app.dependency_overrides.clear()
