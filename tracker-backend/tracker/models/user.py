# File: tracker/models/user.py

"""
User model.

A user's projects are not stored on the user row. They are read through
the project_members table, the same rows that make up Project.members, so
the two sides of a membership can't drift apart.
"""

import enum
from typing import TYPE_CHECKING, List

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker.models.base import Base, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from tracker.models.project import Project


class UserRole(str, enum.Enum):
    admin = "admin"
    member = "member"


class User(IdMixin, TimestampMixin, Base):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, length=16),
        default=UserRole.member,
        nullable=False,
    )

    projects: Mapped[List["Project"]] = relationship(
        "Project",
        secondary="project_members",
        order_by="Project.created_at",
        viewonly=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def project_ids(self) -> List[str]:
        return [project.id for project in self.projects]

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role.value}>"
