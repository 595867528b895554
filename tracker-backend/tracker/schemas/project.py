# File: tracker/schemas/project.py

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, TypeAdapter, field_validator

from tracker.models.project import ProjectStatus
from tracker.schemas.base import CamelModel
from tracker.schemas.update import UpdateRead
from tracker.schemas.user import UserSummary

_DATETIME = TypeAdapter(datetime)


def _date_part(value):
    # Clients may send full timestamps, e.g. "2024-01-01T09:30:00.000Z"
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        try:
            return _DATETIME.validate_python(value).date()
        except ValueError:
            raise ValueError("invalid date or datetime") from None
    return value


class ProjectCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    start_date: date
    due_date: date
    status: ProjectStatus = ProjectStatus.not_started
    members: List[str] = []

    @field_validator("start_date", "due_date", mode="before")
    @classmethod
    def date_from_timestamp(cls, v):
        return _date_part(v)


class ProjectUpdate(CamelModel):
    """
    Partial update. Only keys present in the body are applied, so an
    empty string overwrites while an absent key leaves the field alone.
    """

    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[ProjectStatus] = None
    members: Optional[List[str]] = None

    @field_validator("start_date", "due_date", mode="before")
    @classmethod
    def date_from_timestamp(cls, v):
        return _date_part(v)

    @field_validator("name", "description", "start_date", "due_date", "status", "members", mode="before")
    @classmethod
    def reject_null(cls, v):
        # Only reached for keys sent explicitly; defaults are not validated.
        if v is None:
            raise ValueError("may not be null")
        return v


class MemberEntry(CamelModel):
    user: UserSummary
    added_at: datetime


class ProjectRead(CamelModel):
    id: str
    name: str
    description: str
    status: ProjectStatus
    start_date: date
    due_date: date
    creator: UserSummary
    members: List[MemberEntry] = []
    updates: List[UpdateRead] = []
    created_at: datetime
    updated_at: datetime


class MessageResponse(CamelModel):
    message: str
