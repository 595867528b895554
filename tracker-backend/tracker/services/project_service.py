# File: tracker/services/project_service.py
"""
Project / update store.

All writes for one operation go through a single transaction, including
the multi-row ones: membership replacement and the delete cascade.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Query, Session, selectinload

from tracker.core.exceptions import ProjectNotFoundError, UpdateNotFoundError, ValidationError
from tracker.db.session import transaction
from tracker.models.base import utcnow
from tracker.models.project import Project, ProjectMember, ProjectStatus
from tracker.models.update import Attachment, Update, UpdateKind
from tracker.models.user import User
from tracker.services.storage_service import StoredFile

logger = logging.getLogger(__name__)

# Columns a partial update may touch
UPDATABLE_FIELDS = ("name", "description", "start_date", "due_date", "status")


def _project_query(db: Session) -> Query:
    return db.query(Project).options(
        selectinload(Project.members),
        selectinload(Project.updates).selectinload(Update.attachments),
        selectinload(Project.updates).selectinload(Update.comments),
    )


def _require_text(value: Optional[str], field: str, label: str) -> None:
    if value is None or not value.strip():
        raise ValidationError(f"{label} is required", field=field)


def validate_update_content(content: Optional[str]) -> None:
    _require_text(content, "content", "Content")


def resolve_member_ids(db: Session, member_ids: Iterable[str]) -> List[str]:
    """
    De-duplicate member ids (first occurrence wins) and check that each
    one names an existing user.
    """
    ordered: List[str] = []
    for member_id in member_ids:
        if member_id not in ordered:
            ordered.append(member_id)
    if not ordered:
        return ordered

    found = {row[0] for row in db.query(User.id).filter(User.id.in_(ordered))}
    missing = [member_id for member_id in ordered if member_id not in found]
    if missing:
        raise ValidationError(f"Unknown member id(s): {', '.join(missing)}", field="members")
    return ordered


def _set_members(project: Project, member_ids: Sequence[str]) -> None:
    for member_id in member_ids:
        project.members.append(ProjectMember(user_id=member_id))


# ---------------------------------------------------------
# Projects
# ---------------------------------------------------------

def create_project(
    db: Session,
    *,
    name: str,
    description: str,
    start_date: date,
    due_date: date,
    member_ids: Iterable[str],
    creator: User,
    status: Optional[ProjectStatus] = None,
) -> Project:
    _require_text(name, "name", "Project name")
    _require_text(description, "description", "Description")
    if start_date is None:
        raise ValidationError("Start date is required", field="startDate")
    if due_date is None:
        raise ValidationError("Due date is required", field="dueDate")

    members = resolve_member_ids(db, member_ids)

    project = Project(
        name=name,
        description=description,
        start_date=start_date,
        due_date=due_date,
        status=status or ProjectStatus.not_started,
        creator_id=creator.id,
    )
    _set_members(project, members)

    with transaction(db):
        db.add(project)

    logger.info(
        "Project created: project_id=%s name=%r members=%d creator=%s",
        project.id, project.name, len(members), creator.id,
    )
    return project


def get_project(db: Session, project_id: str) -> Project:
    project = _project_query(db).filter(Project.id == project_id).first()
    if project is None:
        raise ProjectNotFoundError(project_id)
    return project


def ensure_project_exists(db: Session, project_id: str) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    return project


def list_projects(db: Session, identity: User) -> List[Project]:
    """
    Every project for an admin; only the caller's projects otherwise.
    """
    if identity.is_admin:
        return _project_query(db).order_by(Project.created_at, Project.id).all()
    return list_user_projects(db, identity)


def list_user_projects(db: Session, identity: User) -> List[Project]:
    return (
        _project_query(db)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .filter(ProjectMember.user_id == identity.id)
        .order_by(Project.created_at, Project.id)
        .all()
    )


def update_project(
    db: Session,
    project_id: str,
    changes: Dict[str, Any],
    member_ids: Optional[Iterable[str]] = None,
) -> Project:
    """
    Apply a partial update.

    ``changes`` holds only the fields the caller sent. When ``member_ids``
    is given it replaces the whole membership: every existing entry is
    dropped, then the new list is added in order.
    """
    project = get_project(db, project_id)

    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    members = resolve_member_ids(db, member_ids) if member_ids is not None else None
    if members is not None and members == project.member_ids:
        # Same list in the same order: existing entries keep their added_at
        members = None

    with transaction(db):
        for field, value in changes.items():
            setattr(project, field, value)

        if members is not None:
            project.members.clear()
            # Old rows must be gone before re-adding a user who stays on.
            db.flush()
            _set_members(project, members)

        if changes or members is not None:
            project.updated_at = utcnow()

    logger.info(
        "Project updated: project_id=%s fields=%s members_replaced=%s",
        project.id, sorted(changes), members is not None,
    )
    return get_project(db, project.id)


def delete_project(db: Session, project_id: str) -> None:
    """
    Delete a project and everything hanging off it.

    Order: membership rows, attachments, updates (comments included), then
    the project. Each step deletes by project id, so the sequence can be
    re-run after a partial failure; here it runs in one transaction.
    """
    project = ensure_project_exists(db, project_id)

    update_ids = select(Update.id).where(Update.project_id == project_id)

    with transaction(db):
        detached = (
            db.query(ProjectMember)
            .filter(ProjectMember.project_id == project_id)
            .delete(synchronize_session=False)
        )
        db.query(Attachment).filter(Attachment.update_id.in_(update_ids)).delete(
            synchronize_session=False
        )
        removed = (
            db.query(Update)
            .filter(Update.project_id == project_id)
            .delete(synchronize_session=False)
        )
        db.query(Project).filter(Project.id == project_id).delete(synchronize_session=False)
        db.expunge(project)

    logger.info(
        "Project deleted: project_id=%s members_detached=%d updates_removed=%d",
        project_id, detached, removed,
    )


# ---------------------------------------------------------
# Updates & comments
# ---------------------------------------------------------

def add_update(
    db: Session,
    project_id: str,
    author: User,
    content: str,
    attachments: Sequence[StoredFile] = (),
) -> Update:
    """
    Post an update on a project. Attachments are already stored; only
    their filename and path are recorded here.
    """
    validate_update_content(content)
    project = ensure_project_exists(db, project_id)

    update = Update(
        project_id=project.id,
        author_id=author.id,
        content=content,
        kind=UpdateKind.update,
    )
    for stored in attachments:
        update.attachments.append(Attachment(filename=stored.filename, path=stored.path))

    with transaction(db):
        project.updates.append(update)

    logger.info(
        "Update added: update_id=%s project_id=%s author=%s attachments=%d",
        update.id, project_id, author.id, len(attachments),
    )
    return update


def add_comment(
    db: Session,
    project_id: str,
    update_id: str,
    author: User,
    content: str,
) -> Update:
    """
    Reply to an update (or to another comment) on the same project.
    """
    validate_update_content(content)
    ensure_project_exists(db, project_id)

    parent = db.get(Update, update_id)
    if parent is None or parent.project_id != project_id:
        raise UpdateNotFoundError(update_id)

    comment = Update(
        project_id=project_id,
        author_id=author.id,
        content=content,
        kind=UpdateKind.comment,
        parent_update_id=parent.id,
    )

    with transaction(db):
        parent.comments.append(comment)

    logger.info(
        "Comment added: update_id=%s parent=%s project_id=%s author=%s",
        comment.id, parent.id, project_id, author.id,
    )
    return comment
