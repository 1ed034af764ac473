"""
Test database models (User, Event and Attendee).
"""
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from events_api.models.attendees import Attendee
from events_api.models.events import Event


class TestEventModel:
    """Test the Event model."""

    def test_create_event(self, db_session: Session, user):
        event = Event(
            name="Test Event",
            start_time=datetime(2024, 5, 1, 9, 0),
            end_time=datetime(2024, 5, 1, 17, 0),
            user_id=user.id,
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)

        assert event.id is not None
        assert event.description is None
        assert event.created_at is not None
        assert event.user.email == "ada@example.com"

    def test_event_relationship_with_attendees(self, db_session: Session, user, other_user, make_event, make_attendee):
        event = make_event(user)
        make_attendee(event, user)
        make_attendee(event, other_user)

        db_session.refresh(event)

        assert len(event.attendees) == 2
        assert all(a.event_id == event.id for a in event.attendees)

    def test_deleting_event_keeps_attendees(self, db_session: Session, user, other_user, make_event, make_attendee):
        event = make_event(user)
        attendee = make_attendee(event, other_user)
        attendee_id = attendee.id

        db_session.delete(event)
        db_session.commit()

        orphan = db_session.scalar(select(Attendee).where(Attendee.id == attendee_id))
        assert orphan is not None
        assert orphan.event is None


class TestAttendeeModel:
    """Test the Attendee model."""

    def test_attendee_relationships(self, db_session: Session, user, other_user, make_event, make_attendee):
        event = make_event(user, name="Conference")
        attendee = make_attendee(event, other_user)

        assert attendee.id is not None
        assert attendee.created_at is not None
        assert attendee.event.name == "Conference"
        assert attendee.user.name == "Bob Guest"

    def test_user_attendances(self, db_session: Session, user, other_user, make_event, make_attendee):
        make_attendee(make_event(user, name="A"), other_user)
        make_attendee(make_event(user, name="B"), other_user)

        db_session.refresh(other_user)

        assert sorted(a.event.name for a in other_user.attendances) == ["A", "B"]
        assert other_user.events == []
