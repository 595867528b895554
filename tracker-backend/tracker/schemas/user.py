# File: tracker/schemas/user.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from tracker.models.user import UserRole
from tracker.schemas.base import CamelModel


class UserSummary(CamelModel):
    """Display-safe view of a user: never carries the password hash."""

    id: str
    name: str
    email: str


class UserRead(UserSummary):
    role: UserRole
    project_ids: List[str] = []
    created_at: datetime


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, min_length=6)


class TokenResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserRead
