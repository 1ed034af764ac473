import os

# settings are read at import time; keep the app off disk and bcrypt fast
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from events_api.core.config import settings
from events_api.core.redis_config import get_redis
from events_api.core.security import create_access_token
from events_api.database.db import Base, get_db
from events_api.main import app
from events_api.models.attendees import Attendee
from events_api.models.events import Event
from events_api.services.cache import ResponseCache
from events_api.services.rate_limit import RateLimiter
from events_api.services.users import create_user

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_redis():
    client = fakeredis.FakeRedis(decode_responses=True)
    client.flushall()
    yield client
    client.flushall()


@pytest.fixture
def redis_client(fake_redis):
    """Route the application's redis dependency to the fake server."""
    def override_get_redis():
        yield fake_redis

    app.dependency_overrides[get_redis] = override_get_redis
    yield fake_redis
    app.dependency_overrides.pop(get_redis, None)


@pytest.fixture
def cache(fake_redis) -> ResponseCache:
    return ResponseCache(fake_redis)


@pytest.fixture
def rate_limiter(fake_redis) -> RateLimiter:
    return RateLimiter(fake_redis, settings.update_rate_limit, settings.update_rate_window)


@pytest.fixture
def client(db_session, redis_client):
    def override_get_db():
        db: Session = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def user(db_session):
    return create_user(db_session, "Ada Owner", "ada@example.com", "secret-password")


@pytest.fixture
def other_user(db_session):
    return create_user(db_session, "Bob Guest", "bob@example.com", "other-password")


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def other_auth_headers(other_user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_user)}"}


@pytest.fixture
def make_event(db_session):
    """Factory persisting an event owned by the given user."""
    def _make(owner, name="Conf", start_time=None, end_time=None, description=None) -> Event:
        event = Event(
            name=name,
            description=description,
            start_time=start_time or datetime(2024, 1, 1, 10, 0),
            end_time=end_time or datetime(2024, 1, 1, 12, 0),
            user_id=owner.id,
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make


@pytest.fixture
def make_attendee(db_session):
    def _make(event, attendee_user) -> Attendee:
        attendee = Attendee(event_id=event.id, user_id=attendee_user.id)
        db_session.add(attendee)
        db_session.commit()
        db_session.refresh(attendee)
        return attendee

    return _make
