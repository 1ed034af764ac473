from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlalchemy.orm import Session

from events_api.core.security import get_current_user, get_optional_user
from events_api.database.db import get_db
from events_api.models.users import User
from events_api.routes.errors import to_http_exception
from events_api.routes.params import MAX_ID, MAX_PAGE
from events_api.schemas.attendees import AttendeeOut, AttendeePage
from events_api.schemas.events import MessageOut
from events_api.services.attendees import AttendeeService
from events_api.services.exceptions import ServiceError

router = APIRouter(prefix="/events/{event_id}/attendees", tags=["attendees"])


def get_attendee_service(db: Session = Depends(get_db)) -> AttendeeService:
    return AttendeeService(db)


@router.get("", response_model=AttendeePage, response_model_exclude_unset=True)
def list_attendees(
    event_id: int = Path(..., le=MAX_ID),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    current_user: Optional[User] = Depends(get_optional_user),
    service: AttendeeService = Depends(get_attendee_service),
):
    try:
        return service.list_attendees(event_id, page=page, actor=current_user)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.post("", response_model=AttendeeOut, response_model_exclude_unset=True, status_code=status.HTTP_201_CREATED)
def create_attendee(
    event_id: int = Path(..., le=MAX_ID),
    current_user: User = Depends(get_current_user),
    service: AttendeeService = Depends(get_attendee_service),
):
    """Register the caller as an attendee of the event."""
    try:
        return service.create_attendee(current_user, event_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/{attendee_id}", response_model=AttendeeOut, response_model_exclude_unset=True)
def get_attendee(
    event_id: int = Path(..., le=MAX_ID),
    attendee_id: int = Path(..., le=MAX_ID),
    current_user: Optional[User] = Depends(get_optional_user),
    service: AttendeeService = Depends(get_attendee_service),
):
    try:
        return service.get_attendee(event_id, attendee_id, actor=current_user)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.put("/{attendee_id}", response_model=AttendeeOut, response_model_exclude_unset=True)
def update_attendee(
    event_id: int = Path(..., le=MAX_ID),
    attendee_id: int = Path(..., le=MAX_ID),
    payload: Optional[dict[str, Any]] = Body(None),
    current_user: User = Depends(get_current_user),
    service: AttendeeService = Depends(get_attendee_service),
):
    """Authorized like a delete; the attendee is returned unchanged."""
    try:
        return service.update_attendee(current_user, event_id, attendee_id, payload)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.delete("/{attendee_id}", response_model=MessageOut)
def delete_attendee(
    event_id: int = Path(..., le=MAX_ID),
    attendee_id: int = Path(..., le=MAX_ID),
    current_user: User = Depends(get_current_user),
    service: AttendeeService = Depends(get_attendee_service),
):
    """Acknowledges the deletion; the attendee row is kept."""
    try:
        return service.delete_attendee(current_user, event_id, attendee_id)
    except ServiceError as e:
        raise to_http_exception(e) from e
