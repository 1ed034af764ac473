import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from events_api.core.security import create_access_token, hash_password, new_jti, verify_password
from events_api.models.users import User
from events_api.services.exceptions import ValidationError

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == email))


def create_user(db: Session, name: str, email: str, password: str) -> User:
    user = User(name=name, email=email, password=hash_password(password), token_jti=new_jti())
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s <%s>", user.id, user.email)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password):
        return None
    return user


def login(db: Session, email: str, password: str) -> str:
    """Issue a bearer token for valid credentials."""
    user = authenticate(db, email, password)
    if user is None:
        logger.info("Failed login for %s", email)
        raise ValidationError({"email": ["The provided credentials are incorrect."]})
    logger.info("User %s logged in", user.id)
    return create_access_token(user)


def revoke_tokens(db: Session, user: User) -> None:
    """Invalidate every token issued to ``user`` so far."""
    user.token_jti = new_jti()
    db.commit()
    logger.info("User %s logged out", user.id)
