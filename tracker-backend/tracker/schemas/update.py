# File: tracker/schemas/update.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from tracker.models.update import UpdateKind
from tracker.schemas.base import CamelModel
from tracker.schemas.user import UserSummary


class AttachmentRead(CamelModel):
    id: str
    filename: str
    path: str
    uploaded_at: datetime


class UpdateRead(CamelModel):
    id: str
    project_id: str
    author: UserSummary
    content: str
    kind: UpdateKind
    attachments: List[AttachmentRead] = []
    parent_update_id: Optional[str] = None
    comments: List[UpdateRead] = []
    created_at: datetime
    updated_at: datetime


class CommentCreate(CamelModel):
    content: str


class UpdateCreate(CamelModel):
    """JSON body for posting an update without attachments. Other keys are ignored."""

    content: Optional[str] = None


UpdateRead.model_rebuild()
