"""
Selective eager-loading driven by the ``include`` query parameter.

A resource declares which relationships callers may ask for; the
``include`` parameter (comma separated) picks a subset of them.  The same
decision is applied either to a not-yet-executed ``select()`` or to an
instance that has already been loaded.
"""

from typing import Optional, Sequence, TypeVar, Union

from sqlalchemy import Select, select
from sqlalchemy.orm import Load, object_session, selectinload

from events_api.database.db import Base

T = TypeVar("T", bound=Union[Select, Base])


class RelationshipIncluder:
    """Resolve and attach the relationships requested through ``include``.

    Usage:
        >>> includer = RelationshipIncluder(Event, ("user", "attendees", "attendees.user"))
        >>> includer.resolve("attendees,foo")
        ['attendees']
        >>> stmt = includer.apply(select(Event), "user")
    """

    def __init__(self, model: type[Base], allowed: Sequence[str]):
        self.model = model
        self.allowed = tuple(allowed)

    def resolve(self, include: Optional[str]) -> list[str]:
        """Return the allowed relations named in ``include``.

        Entries are matched exactly (no whitespace trimming) and unknown
        names are ignored.  The result follows the allow-list order so a
        parent relation always precedes its dotted children.
        """
        if not include:
            return []
        requested = include.split(",")
        return [relation for relation in self.allowed if relation in requested]

    def loader_options(self, relations: Sequence[str]) -> list[Load]:
        return [self._loader_for(relation) for relation in relations]

    def _loader_for(self, relation: str) -> Load:
        # "attendees.user" -> selectinload(Event.attendees).selectinload(Attendee.user)
        loader = None
        owner = self.model
        for name in relation.split("."):
            attribute = getattr(owner, name)
            loader = selectinload(attribute) if loader is None else loader.selectinload(attribute)
            owner = attribute.property.mapper.class_
        return loader

    def apply(self, target: T, include: Optional[str]) -> T:
        """Eager-load the requested relations on a statement or an instance.

        A ``Select`` gets loader options added and is returned as a new
        statement.  A mapped instance is re-selected in its own session
        with the same options and ``populate_existing``, so the relations
        are attached to that very object, which is returned.
        """
        relations = self.resolve(include)
        if not relations:
            return target

        options = self.loader_options(relations)
        if isinstance(target, Select):
            return target.options(*options)

        session = object_session(target)
        if session is None:
            raise ValueError(f"{target!r} is not attached to a session")
        stmt = (
            select(type(target))
            .where(type(target).id == target.id)
            .options(*options)
            .execution_options(populate_existing=True)
        )
        session.scalars(stmt).one()
        return target
