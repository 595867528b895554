# File: tracker/api/routes/routes_project.py

from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from tracker.api.deps import get_current_user, require_admin, require_project_member
from tracker.core.exceptions import ValidationError
from tracker.db.session import get_db
from tracker.models.user import User
from tracker.schemas.project import MessageResponse, ProjectCreate, ProjectRead, ProjectUpdate
from tracker.schemas.update import CommentCreate, UpdateCreate, UpdateRead
from tracker.services import project_service, storage_service

router = APIRouter()


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project (admin)",
)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    project = project_service.create_project(
        db,
        name=payload.name,
        description=payload.description,
        start_date=payload.start_date,
        due_date=payload.due_date,
        status=payload.status,
        member_ids=payload.members,
        creator=current_user,
    )
    return ProjectRead.model_validate(project)


@router.get("", response_model=List[ProjectRead], summary="List visible projects")
def list_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Admins see every project, members only the ones they belong to.
    """
    projects = project_service.list_projects(db, current_user)
    return [ProjectRead.model_validate(project) for project in projects]


# Declared before /{project_id} so "user" is not taken as an id.
@router.get("/user", response_model=List[ProjectRead], summary="Projects the caller is a member of")
def list_my_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    projects = project_service.list_user_projects(db, current_user)
    return [ProjectRead.model_validate(project) for project in projects]


@router.get("/{project_id}", response_model=ProjectRead, summary="Get project (member)")
def get_project(
    project_id: str,
    db: Session = Depends(get_db),
    _member: User = Depends(require_project_member),
):
    return ProjectRead.model_validate(project_service.get_project(db, project_id))


@router.put("/{project_id}", response_model=ProjectRead, summary="Update project (admin)")
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    """
    Partial update: only keys present in the body change. ``members``,
    when present, replaces the whole member list.
    """
    changes = payload.model_dump(exclude_unset=True)
    member_ids = changes.pop("members", None)
    project = project_service.update_project(db, project_id, changes, member_ids)
    return ProjectRead.model_validate(project)


@router.delete("/{project_id}", response_model=MessageResponse, summary="Delete project (admin)")
def delete_project(
    project_id: str,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    project_service.delete_project(db, project_id)
    return MessageResponse(message="Project deleted")


async def read_update_submission(
    request: Request,
    content: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
) -> Tuple[Optional[str], List[UploadFile]]:
    """
    Content and uploads of a new update. Form bodies are parsed by FastAPI;
    a JSON body is read here and carries content only.
    """
    if not request.headers.get("content-type", "").startswith("application/json"):
        return content, files or []

    try:
        payload = UpdateCreate.model_validate(await request.json())
    except (ValueError, PydanticValidationError) as exc:
        raise ValidationError("Invalid JSON body", field="content") from exc
    return payload.content, []


@router.post(
    "/{project_id}/updates",
    response_model=UpdateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Post an update with optional attachments (member)",
)
def add_update(
    project_id: str,
    current_user: User = Depends(require_project_member),
    submission: Tuple[Optional[str], List[UploadFile]] = Depends(read_update_submission),
    db: Session = Depends(get_db),
):
    """
    Multipart form: ``content`` plus up to MAX_UPLOAD_FILES ``files``, or a
    JSON body ``{"content": ...}`` without attachments.
    Files are stored only after the content and project have been checked.
    """
    content, files = submission
    project_service.validate_update_content(content)
    project_service.ensure_project_exists(db, project_id)

    stored = storage_service.save_uploads(files)
    try:
        update = project_service.add_update(db, project_id, current_user, content, stored)
    except Exception:
        storage_service.delete_stored_files(stored)
        raise
    return UpdateRead.model_validate(update)


@router.post(
    "/{project_id}/updates/{update_id}/comments",
    response_model=UpdateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on an update (member)",
)
def add_comment(
    project_id: str,
    update_id: str,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_project_member),
):
    comment = project_service.add_comment(db, project_id, update_id, current_user, payload.content)
    return UpdateRead.model_validate(comment)
