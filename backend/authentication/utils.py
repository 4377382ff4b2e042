"""
Credential store: user records and revoked tokens, kept as JSON collections.
"""

import os
import logging
from typing import List, Optional
from backend.core.config import settings
from backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from backend.core.storage import load_json, save_json, locked, new_object_id, utcnow
from backend.authentication import schemas

logger = logging.getLogger(__name__)

USERS_FILE = os.path.join(settings.DATA_DIR, "users", "users.json")
REVOKED_TOKENS_FILE = os.path.join(settings.DATA_DIR, "users", "revoked_tokens.json")


def load_all_users() -> List[dict]:
    return load_json(USERS_FILE)


def save_users(users: List[dict]) -> None:
    save_json(USERS_FILE, users)


def get_user_by_id(user_id: str) -> Optional[dict]:
    return next((u for u in load_all_users() if u["id"] == user_id), None)


def get_user_by_identifier(identifier: str) -> Optional[dict]:
    """Look a user up by username or (case-insensitive) email."""
    ident = identifier.strip()
    for user in load_all_users():
        if user["username"] == ident or user["email"] == ident.lower():
            return user
    return None


def user_exists(username: str, email: str) -> tuple:
    for user in load_all_users():
        if user["username"].lower() == username.lower():
            return True, "Username already taken"
        if user["email"] == email.lower():
            return True, "Email already registered"
    return False, ""


def add_user(user: schemas.UserCreate, hashed_password: str) -> dict:
    with locked(USERS_FILE):
        exists, message = user_exists(user.username, user.email)
        if exists:
            raise ConflictError(message)
        now = utcnow().isoformat()
        record = {
            "id": new_object_id(),
            "username": user.username,
            "email": user.email.lower(),
            "hashed_password": hashed_password,
            "role": user.role.value,
            "points": 0,
            "created_at": now,
            "updated_at": now,
        }
        users = load_all_users()
        users.append(record)
        save_users(users)
    logger.info("Registered user %s (%s)", record["username"], record["role"])
    return record


def add_points(user_id: str, points: int) -> dict:
    """Credit (or debit) a user's point balance; the balance never goes negative."""
    with locked(USERS_FILE):
        users = load_all_users()
        for user in users:
            if user["id"] == user_id:
                new_balance = user.get("points", 0) + points
                if new_balance < 0:
                    raise ValidationError(errors=["points: Points cannot be negative"])
                user["points"] = new_balance
                user["updated_at"] = utcnow().isoformat()
                save_users(users)
                return user
    raise NotFoundError("User")


def get_identity(user_id: str) -> schemas.TokenData:
    user = get_user_by_id(user_id)
    if not user:
        raise NotFoundError("User")
    return to_identity(user)


def to_identity(user: dict) -> schemas.TokenData:
    return schemas.TokenData(user_id=user["id"], username=user["username"], role=user["role"])


def to_public(user: dict) -> schemas.UserResponse:
    return schemas.UserResponse(**{k: v for k, v in user.items() if k != "hashed_password"})


# ────────────────────────────────
# Revoked tokens
# ────────────────────────────────
def revoke_token(token: str, expires_at: int) -> None:
    """Remember a logged-out token until its own ``exp``; expired entries are dropped."""
    now = utcnow().timestamp()
    with locked(REVOKED_TOKENS_FILE):
        revoked = [e for e in load_json(REVOKED_TOKENS_FILE) if e["exp"] > now]
        if not any(e["token"] == token for e in revoked):
            revoked.append({"token": token, "exp": expires_at})
        save_json(REVOKED_TOKENS_FILE, revoked)


def is_token_revoked(token: str) -> bool:
    return any(e["token"] == token for e in load_json(REVOKED_TOKENS_FILE))
