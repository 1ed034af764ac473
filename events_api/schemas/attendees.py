from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import inspect

from events_api.models.attendees import Attendee
from events_api.schemas.pagination import PageMeta
from events_api.schemas.users import UserOut


def is_loaded(instance, relation: str) -> bool:
    """True when ``relation`` was eager-loaded and reading it will not hit the database."""
    return relation not in inspect(instance).unloaded


class AttendeeOut(BaseModel):
    id: int
    event_id: int
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    user: Optional[UserOut] = None

    @classmethod
    def from_model(cls, attendee: Attendee) -> "AttendeeOut":
        fields = {
            "id": attendee.id,
            "event_id": attendee.event_id,
            "user_id": attendee.user_id,
            "created_at": attendee.created_at,
            "updated_at": attendee.updated_at,
        }
        if is_loaded(attendee, "user"):
            fields["user"] = UserOut.model_validate(attendee.user)
        return cls(**fields)


class AttendeePage(BaseModel):
    data: list[AttendeeOut]
    meta: PageMeta
