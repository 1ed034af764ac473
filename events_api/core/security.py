"""
Password hashing and bearer token authentication.

Tokens are HS256 JWTs carrying the user id (``sub``) and the user's
current ``token_jti``.  A token is accepted only while that identifier
still matches the one stored on the user; logging out rotates it, which
revokes every token issued before.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from events_api.core.config import settings
from events_api.database.db import get_db
from events_api.models.users import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def new_jti() -> str:
    return uuid.uuid4().hex


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(tz=timezone.utc)
    expires = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {
        "sub": str(user.id),
        "jti": user.token_jti,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token claims, or ``None`` for a malformed, forged or expired token."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.PyJWTError as e:
        logger.debug("Rejected bearer token: %s", e)
        return None


def _unauthenticated(detail: str = "Unauthenticated.") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(db: Session, token: str) -> Optional[User]:
    payload = decode_access_token(token)
    if not payload or "sub" not in payload:
        return None
    try:
        user = db.get(User, int(payload["sub"]))
    except (TypeError, ValueError):
        return None
    if user is None or user.token_jti != payload.get("jti"):
        return None
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Current user for routes open to anonymous callers.

    A missing header, or a token that does not resolve to a user, leaves
    the caller anonymous.
    """
    if credentials is None:
        return None
    return _user_from_token(db, credentials.credentials)


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise _unauthenticated()
    return user
