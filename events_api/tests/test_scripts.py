"""
Test the user provisioning script.
"""
import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from events_api.models.users import User
from events_api.scripts import create_user as create_user_script
from events_api.services.users import login


@pytest.fixture
def script_db(db_session: Session, monkeypatch):
    """Point the script at the test database."""
    bind = db_session.get_bind()
    monkeypatch.setattr(create_user_script, "engine", bind)
    monkeypatch.setattr(create_user_script, "SessionLocal", sessionmaker(autocommit=False, autoflush=False, bind=bind))
    return db_session


class TestCreateUserScript:
    def test_created_user_can_log_in(self, script_db, capsys):
        exit_code = create_user_script.main(["Cy Admin", "cy@example.com", "--password", "s3cret-pass"])

        assert exit_code == 0
        assert "cy@example.com" in capsys.readouterr().out
        user = script_db.scalar(select(User).where(User.email == "cy@example.com"))
        assert user.name == "Cy Admin"
        assert user.password != "s3cret-pass"
        assert login(script_db, "cy@example.com", "s3cret-pass")

    def test_password_is_prompted_for(self, script_db, monkeypatch):
        monkeypatch.setattr(create_user_script.getpass, "getpass", lambda prompt="": "typed-pass")

        assert create_user_script.main(["Cy Admin", "cy@example.com"]) == 0
        assert login(script_db, "cy@example.com", "typed-pass")

    def test_empty_password_is_refused(self, script_db, monkeypatch):
        monkeypatch.setattr(create_user_script.getpass, "getpass", lambda prompt="": "")

        assert create_user_script.main(["Cy Admin", "cy@example.com"]) == 1
        assert script_db.scalar(select(User).where(User.email == "cy@example.com")) is None

    def test_taken_email_is_refused(self, script_db, user):
        assert create_user_script.main(["Ada Again", "ada@example.com", "--password", "x"]) == 1
        assert script_db.query(User).filter(User.email == "ada@example.com").count() == 1
