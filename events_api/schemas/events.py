from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, StringConstraints, ValidationInfo, field_validator

from events_api.models.events import Event
from events_api.schemas.attendees import AttendeeOut, is_loaded
from events_api.schemas.pagination import PageMeta
from events_api.schemas.users import UserOut

END_BEFORE_START = "The end time must be after the start time."
START_AFTER_END = "The start time must be before the end time."

# surrounding whitespace is trimmed before the length checks
EventName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


def as_naive_utc(value: datetime) -> datetime:
    """Timestamps are stored naive, in UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ---------- Requests ----------
class EventCreate(BaseModel):
    name: EventName
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime

    @field_validator("start_time")
    @classmethod
    def normalize_start(cls, value: datetime) -> datetime:
        return as_naive_utc(value)

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, value: datetime, info: ValidationInfo) -> datetime:
        value = as_naive_utc(value)
        start_time = info.data.get("start_time")
        if start_time is not None and value <= start_time:
            raise ValueError(END_BEFORE_START)
        return value


class EventUpdate(BaseModel):
    """Partial update; a field is validated only when it is present.

    The stored times of the event being updated are passed in the
    validation context as ``start_time`` and ``end_time`` so the order of
    the two can be checked when only one of them changes.
    """

    name: EventName = None
    description: Optional[str] = None
    start_time: datetime = None
    end_time: datetime = None

    @field_validator("start_time")
    @classmethod
    def start_before_stored_end(cls, value: datetime, info: ValidationInfo) -> datetime:
        value = as_naive_utc(value)
        stored_end = (info.context or {}).get("end_time")
        if "end_time" not in (info.context or {}).get("fields", ()) and stored_end is not None:
            if value >= stored_end:
                raise ValueError(START_AFTER_END)
        return value

    @field_validator("end_time")
    @classmethod
    def end_after_effective_start(cls, value: datetime, info: ValidationInfo) -> datetime:
        value = as_naive_utc(value)
        fields = (info.context or {}).get("fields", ())
        if "start_time" in fields:
            # an invalid start_time is reported on its own field
            start_time = info.data.get("start_time")
        else:
            start_time = (info.context or {}).get("start_time")
        if start_time is not None and value <= start_time:
            raise ValueError(END_BEFORE_START)
        return value


# ---------- Responses ----------
class EventOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # present only when requested through ``include``
    user: Optional[UserOut] = None
    attendees: Optional[list[AttendeeOut]] = None

    @classmethod
    def from_model(cls, event: Event) -> "EventOut":
        fields = {
            "id": event.id,
            "name": event.name,
            "description": event.description,
            "start_time": event.start_time,
            "end_time": event.end_time,
            "user_id": event.user_id,
            "created_at": event.created_at,
            "updated_at": event.updated_at,
        }
        if is_loaded(event, "user"):
            fields["user"] = UserOut.model_validate(event.user)
        if is_loaded(event, "attendees"):
            fields["attendees"] = [AttendeeOut.from_model(attendee) for attendee in event.attendees]
        return cls(**fields)


class EventPage(BaseModel):
    data: list[EventOut]
    meta: PageMeta


class MessageOut(BaseModel):
    message: str
