"""
Database initialization helpers.

Every model module is imported here so its table is registered on
Base.metadata and string relationship targets resolve.
"""

from sqlalchemy.engine import Engine

from tracker.db.session import engine
from tracker.models.base import Base
from tracker.models import project, update, user  # noqa: F401


def init_db(bind: Engine = engine) -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    Base.metadata.create_all(bind=bind)


def drop_db(bind: Engine = engine) -> None:
    Base.metadata.drop_all(bind=bind)
