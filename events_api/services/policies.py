"""
Authorization policies for events and attendees.

Each resource type registers one pure function answering whether an actor
may perform an action.  ``authorize`` turns a negative answer into the
right exception: ``Unauthenticated`` when the action needs an identity and
there is none, ``Forbidden`` otherwise.
"""

import enum
from typing import Callable, Optional, Union

from events_api.models.attendees import Attendee
from events_api.models.events import Event
from events_api.models.users import User
from events_api.services.exceptions import Forbidden, Unauthenticated


class Action(str, enum.Enum):
    VIEW_ANY = "viewAny"
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


PUBLIC_ACTIONS = frozenset({Action.VIEW_ANY, Action.VIEW})


def event_policy(actor: Optional[User], action: Action, event: Optional[Event] = None) -> bool:
    if action in PUBLIC_ACTIONS:
        return True
    if actor is None:
        return False
    if action is Action.CREATE:
        return True
    return event is not None and event.user_id == actor.id


def attendee_policy(actor: Optional[User], action: Action, attendee: Optional[Attendee] = None) -> bool:
    if action in PUBLIC_ACTIONS:
        return True
    if actor is None:
        return False
    if action is Action.CREATE:
        return True
    if attendee is None:
        return False
    if attendee.user_id == actor.id:
        return True
    return attendee.event is not None and attendee.event.user_id == actor.id


Policy = Callable[[Optional[User], Action, Optional[object]], bool]

POLICIES: dict[type, Policy] = {
    Event: event_policy,
    Attendee: attendee_policy,
}


def _resolve(target: Union[type, object]) -> tuple[Policy, Optional[object]]:
    model = target if isinstance(target, type) else type(target)
    entity = None if isinstance(target, type) else target
    try:
        return POLICIES[model], entity
    except KeyError:
        raise LookupError(f"No policy registered for {model.__name__}") from None


def can(actor: Optional[User], action: Action, target: Union[type, object]) -> bool:
    """Return whether ``actor`` may perform ``action`` on ``target``.

    ``target`` is either an entity or, for collection-level actions such
    as ``viewAny`` and ``create``, the model class itself.
    """
    policy, entity = _resolve(target)
    return policy(actor, action, entity)


def authorize(actor: Optional[User], action: Action, target: Union[type, object]) -> None:
    if can(actor, action, target):
        return
    if actor is None:
        raise Unauthenticated()
    raise Forbidden()
