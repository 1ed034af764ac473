"""
Attendee business logic.

Attendees are nested under an event: every lookup is scoped to the event
named in the path, and an attendee of another event is reported as not
found.  Updating or deleting an attendee is authorized but changes
nothing.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from events_api.core.config import settings
from events_api.models.attendees import Attendee
from events_api.models.events import Event
from events_api.models.users import User
from events_api.schemas.attendees import AttendeeOut
from events_api.services.exceptions import NotFoundError, Unauthenticated
from events_api.services.pagination import paginate
from events_api.services.policies import Action, authorize

logger = logging.getLogger(__name__)


def serialize_attendee(attendee: Attendee) -> dict[str, Any]:
    return AttendeeOut.from_model(attendee).model_dump(mode="json", exclude_unset=True)


class AttendeeService:
    def __init__(self, db: Session):
        self.db = db

    def _get_event_or_404(self, event_id: int) -> Event:
        event = self.db.get(Event, event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    def _get_scoped_or_404(self, event_id: int, attendee_id: int) -> Attendee:
        self._get_event_or_404(event_id)
        attendee = self.db.scalar(
            select(Attendee).where(Attendee.id == attendee_id, Attendee.event_id == event_id)
        )
        if attendee is None:
            raise NotFoundError("Attendee", attendee_id)
        return attendee

    def list_attendees(self, event_id: int, page: int = 1, actor: Optional[User] = None) -> dict[str, Any]:
        self._get_event_or_404(event_id)
        authorize(actor, Action.VIEW_ANY, Attendee)

        stmt = (
            select(Attendee)
            .where(Attendee.event_id == event_id)
            .order_by(Attendee.created_at.desc(), Attendee.id.desc())
        )
        attendees, meta = paginate(self.db, stmt, page, settings.attendees_per_page)
        return {"data": [serialize_attendee(attendee) for attendee in attendees], "meta": meta}

    def create_attendee(self, actor: Optional[User], event_id: int) -> dict[str, Any]:
        """Register ``actor`` for the event.  Registering twice creates two rows."""
        authorize(actor, Action.CREATE, Attendee)
        event = self._get_event_or_404(event_id)

        attendee = Attendee(event_id=event.id, user_id=actor.id)
        self.db.add(attendee)
        self.db.commit()
        self.db.refresh(attendee)
        logger.info("User %s registered for event %s (attendee %s)", actor.id, event.id, attendee.id)
        return serialize_attendee(attendee)

    def get_attendee(self, event_id: int, attendee_id: int, actor: Optional[User] = None) -> dict[str, Any]:
        attendee = self._get_scoped_or_404(event_id, attendee_id)
        authorize(actor, Action.VIEW, attendee)
        return serialize_attendee(attendee)

    def update_attendee(self, actor: Optional[User], event_id: int, attendee_id: int, payload: Any = None) -> dict[str, Any]:
        if actor is None:
            raise Unauthenticated()
        attendee = self._get_scoped_or_404(event_id, attendee_id)
        authorize(actor, Action.UPDATE, attendee)
        # attendees have nothing to update; the payload is ignored
        return serialize_attendee(attendee)

    def delete_attendee(self, actor: Optional[User], event_id: int, attendee_id: int) -> dict[str, str]:
        if actor is None:
            raise Unauthenticated()
        attendee = self._get_scoped_or_404(event_id, attendee_id)
        authorize(actor, Action.DELETE, attendee)
        logger.info("User %s asked to delete attendee %s of event %s (kept)", actor.id, attendee.id, event_id)
        return {"message": "Attendee deleted successfully!"}
