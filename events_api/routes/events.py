from typing import Any, Optional

import redis
from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlalchemy.orm import Session

from events_api.core.config import settings
from events_api.core.redis_config import get_redis
from events_api.core.security import get_current_user, get_optional_user
from events_api.database.db import get_db
from events_api.models.users import User
from events_api.routes.errors import to_http_exception
from events_api.routes.params import MAX_ID, MAX_PAGE
from events_api.schemas.events import EventOut, EventPage, MessageOut
from events_api.services.cache import ResponseCache
from events_api.services.events import EventService
from events_api.services.exceptions import ServiceError
from events_api.services.rate_limit import RateLimiter

router = APIRouter(prefix="/events", tags=["events"])

INCLUDE_DESCRIPTION = "Comma separated relations to embed: user, attendees, attendees.user"


def get_event_service(db: Session = Depends(get_db), redis_client: redis.Redis = Depends(get_redis)) -> EventService:
    limiter = RateLimiter(redis_client, settings.update_rate_limit, settings.update_rate_window)
    return EventService(db, ResponseCache(redis_client), limiter)


@router.get("", response_model=EventPage, response_model_exclude_unset=True)
def list_events(
    include: Optional[str] = Query(None, description=INCLUDE_DESCRIPTION),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    current_user: Optional[User] = Depends(get_optional_user),
    service: EventService = Depends(get_event_service),
):
    """Latest events first; identical ``include`` values share a cached page for a minute."""
    try:
        return service.list_events(include=include, page=page, actor=current_user)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.post("", response_model=EventOut, response_model_exclude_unset=True, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: Optional[dict[str, Any]] = Body(None),
    current_user: User = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
):
    try:
        return service.create_event(current_user, payload or {})
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{event_id}", response_model=EventOut, response_model_exclude_unset=True)
def get_event(
    event_id: int = Path(..., le=MAX_ID),
    include: Optional[str] = Query(None, description=INCLUDE_DESCRIPTION),
    current_user: Optional[User] = Depends(get_optional_user),
    service: EventService = Depends(get_event_service),
):
    try:
        return service.get_event(event_id, include=include, actor=current_user)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.put("/{event_id}", response_model=EventOut, response_model_exclude_unset=True)
def update_event(
    event_id: int = Path(..., le=MAX_ID),
    payload: Optional[dict[str, Any]] = Body(None),
    current_user: User = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
):
    """Partial update, owner only, at most three calls per minute per user."""
    try:
        return service.update_event(current_user, event_id, payload or {})
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.delete("/{event_id}", response_model=MessageOut)
def delete_event(
    event_id: int = Path(..., le=MAX_ID),
    current_user: User = Depends(get_current_user),
    service: EventService = Depends(get_event_service),
):
    try:
        return service.delete_event(current_user, event_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
