from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from events_api.core.security import get_current_user
from events_api.database.db import get_db
from events_api.models.users import User
from events_api.routes.errors import to_http_exception
from events_api.schemas.events import MessageOut
from events_api.schemas.users import LoginRequest, TokenOut, UserOut
from events_api.services import users
from events_api.services.exceptions import ServiceError

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=TokenOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    try:
        return {"token": users.login(db, payload.email, payload.password)}
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.post("/logout", response_model=MessageOut)
def logout(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    users.revoke_tokens(db, current_user)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserOut)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
