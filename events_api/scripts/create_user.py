#!/usr/bin/env python3
"""
Create a user account that can log in through ``POST /login``.

The API has no registration endpoint; accounts are provisioned with this
script against the database named by ``DATABASE_URL``.

Usage:
    events-api-create-user "Ada Lovelace" ada@example.com
    events-api-create-user "Ada Lovelace" ada@example.com --password s3cret

Without ``--password`` the password is prompted for.
"""

import argparse
import getpass
import logging
import sys
from typing import Optional, Sequence

from events_api.core.config import settings
from events_api.core.logging_config import setup_logging
from events_api.database.db import Base, SessionLocal, engine
from events_api.models import attendees, events, users  # noqa: F401  (register tables)
from events_api.services.users import create_user, get_user_by_email

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create an Events API user account.")
    parser.add_argument("name", help="Display name of the user")
    parser.add_argument("email", help="Login email; must not be taken yet")
    parser.add_argument("--password", help="Password (prompted for when omitted)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings.log_level)

    password = args.password or getpass.getpass("Password: ")
    if not password:
        logger.error("A password is required")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if get_user_by_email(db, args.email) is not None:
            logger.error("A user with email %s already exists", args.email)
            return 1
        user = create_user(db, args.name, args.email, password)
    finally:
        db.close()

    print(f"Created user {user.id} <{args.email}>")
    return 0


if __name__ == "__main__":
    sys.exit(main())
