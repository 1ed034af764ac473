"""
Event business logic.

Every operation consults the authorization policies before touching the
store.  The listing goes through the shared response cache; updates go
through the per-user rate limiter first.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from events_api.core.config import settings
from events_api.models.events import Event
from events_api.models.users import User
from events_api.schemas.events import EventCreate, EventOut, EventUpdate
from events_api.services.cache import ResponseCache, events_listing_key
from events_api.services.exceptions import NotFoundError, Unauthenticated
from events_api.services.pagination import paginate
from events_api.services.policies import Action, authorize
from events_api.services.rate_limit import RateLimiter
from events_api.services.relationships import RelationshipIncluder
from events_api.services.validation import validate

logger = logging.getLogger(__name__)

EVENT_RELATIONS = ("user", "attendees", "attendees.user")

event_includer = RelationshipIncluder(Event, EVENT_RELATIONS)


def serialize_event(event: Event) -> dict[str, Any]:
    return EventOut.from_model(event).model_dump(mode="json", exclude_unset=True)


class EventService:
    def __init__(self, db: Session, cache: ResponseCache, rate_limiter: RateLimiter):
        self.db = db
        self.cache = cache
        self.rate_limiter = rate_limiter

    def _get_or_404(self, event_id: int) -> Event:
        event = self.db.get(Event, event_id)
        if event is None:
            raise NotFoundError("Event", event_id)
        return event

    def list_events(self, include: Optional[str] = None, page: int = 1, actor: Optional[User] = None) -> dict[str, Any]:
        """Latest events first, one page at a time.

        The page is cached for ``settings.events_cache_ttl`` seconds under a
        key built from ``include`` alone: any page number asked for while the
        entry lives gets the page that was computed first.  Writes do not
        invalidate the entry.
        """
        authorize(actor, Action.VIEW_ANY, Event)

        def produce() -> dict[str, Any]:
            stmt = select(Event).order_by(Event.created_at.desc(), Event.id.desc())
            stmt = event_includer.apply(stmt, include)
            events, meta = paginate(self.db, stmt, page, settings.events_per_page)
            return {"data": [serialize_event(event) for event in events], "meta": meta}

        return self.cache.get_or_compute(events_listing_key(include), settings.events_cache_ttl, produce)

    def get_event(self, event_id: int, include: Optional[str] = None, actor: Optional[User] = None) -> dict[str, Any]:
        event = self._get_or_404(event_id)
        authorize(actor, Action.VIEW, event)
        event_includer.apply(event, include)
        return serialize_event(event)

    def create_event(self, actor: Optional[User], payload: Any) -> dict[str, Any]:
        authorize(actor, Action.CREATE, Event)
        data = validate(EventCreate, payload)

        event = Event(**data.model_dump(), user_id=actor.id)
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        logger.info("User %s created event %s '%s'", actor.id, event.id, event.name)
        return serialize_event(event)

    def update_event(self, actor: Optional[User], event_id: int, payload: Any) -> dict[str, Any]:
        """Apply a partial update.

        Checks run in this order, the first failure winning: identity,
        rate limit, existence, ownership, payload.
        """
        if actor is None:
            raise Unauthenticated()
        self.rate_limiter.hit(f"update-event:{actor.id}")

        event = self._get_or_404(event_id)
        authorize(actor, Action.UPDATE, event)

        context = {
            "start_time": event.start_time,
            "end_time": event.end_time,
            "fields": tuple(payload) if isinstance(payload, dict) else (),
        }
        changes = validate(EventUpdate, payload, context=context).model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(event, field, value)
        self.db.commit()
        self.db.refresh(event)
        logger.info("User %s updated event %s (%s)", actor.id, event.id, ", ".join(changes) or "no changes")
        return serialize_event(event)

    def delete_event(self, actor: Optional[User], event_id: int) -> dict[str, str]:
        """Hard delete.  Attendee rows of the event are left untouched."""
        if actor is None:
            raise Unauthenticated()
        event = self._get_or_404(event_id)
        authorize(actor, Action.DELETE, event)

        self.db.delete(event)
        self.db.commit()
        logger.info("User %s deleted event %s", actor.id, event_id)
        return {"message": "Event deleted successfully!"}
