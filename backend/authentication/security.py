from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging
import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from backend.core.config import settings
from backend.core.exceptions import AuthError, ForbiddenError
from backend.authentication import schemas, utils

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        return False


def verify_credentials(identifier: str, password: str) -> dict:
    """Return the stored user for a username/email + password pair."""
    user = utils.get_user_by_identifier(identifier)
    if not user or not verify_password(password, user["hashed_password"]):
        logger.warning("Failed login for %r", identifier)
        raise AuthError("Invalid credentials")
    return user


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def token_for(user: dict) -> str:
    return create_access_token({"sub": user["id"], "role": user["role"]})


def token_expiry(token: str) -> int:
    """``exp`` claim of a token already accepted by get_current_user."""
    return int(jwt.get_unverified_claims(token).get("exp", 0))


def get_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthError("Access token required")
    return credentials.credentials


def get_current_user(token: str = Depends(get_token)) -> schemas.TokenData:
    """Resolve the bearer token to the caller's Identity."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthError("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id or utils.is_token_revoked(token):
        raise AuthError("Invalid or expired token")

    user = utils.get_user_by_id(user_id)
    if user is None:
        raise AuthError("User no longer exists")
    return utils.to_identity(user)


def require_teacher_or_admin(current_user: schemas.TokenData = Depends(get_current_user)) -> schemas.TokenData:
    if not current_user.is_staff:
        raise ForbiddenError("Access denied. Teacher or admin role required.")
    return current_user
