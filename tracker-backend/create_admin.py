"""
Create (or promote) an admin account.

Run this from the backend root:

    (.venv) python create_admin.py --email admin@example.com --name "Admin" --password s3cret!

If a user with that email already exists it is promoted to admin and the
password is left unchanged.
"""

import argparse
import logging

from tracker.core.logging_config import setup_logging
from tracker.db.init_db import init_db
from tracker.db.session import SessionLocal
from tracker.services import user_service

logger = logging.getLogger("create_admin")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or promote an admin user.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--password", required=True)
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging()
    init_db()

    db = SessionLocal()
    try:
        user = user_service.ensure_admin(
            db,
            name=args.name,
            email=args.email,
            password=args.password,
        )
        logger.info("Admin ready: id=%s email=%s", user.id, user.email)
    finally:
        db.close()


if __name__ == "__main__":
    main()
