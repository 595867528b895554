# File: tracker/services/access_service.py
"""
Authorization predicates.

Two flat checks: admin, and admin-or-member of a given project. Membership
is read from project_members on every call; a user loaded earlier in the
request may hold a stale project list.
"""

import logging

from sqlalchemy.orm import Session

from tracker.core.exceptions import ForbiddenError
from tracker.models.project import ProjectMember
from tracker.models.user import User

logger = logging.getLogger(__name__)


def is_project_member(db: Session, user_id: str, project_id: str) -> bool:
    row = (
        db.query(ProjectMember.id)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .first()
    )
    return row is not None


def require_admin(identity: User) -> None:
    if not identity.is_admin:
        logger.warning("Admin access denied: user_id=%s role=%s", identity.id, identity.role.value)
        raise ForbiddenError("Admin access required")


def require_project_member(db: Session, identity: User, project_id: str) -> None:
    if identity.is_admin:
        return
    if not is_project_member(db, identity.id, project_id):
        logger.warning("Project access denied: user_id=%s project_id=%s", identity.id, project_id)
        raise ForbiddenError("Project access denied")
