# File: tracker/models/project.py

"""
Project and membership models.

Membership lives in project_members only. Project.members and
User.projects are two views over the same rows, so adding or removing a
member is a single row write.
"""

import enum
from datetime import date, datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker.models.base import Base, IdMixin, TimestampMixin, utcnow

if TYPE_CHECKING:
    from tracker.models.update import Update
    from tracker.models.user import User


class ProjectStatus(str, enum.Enum):
    not_started = "Not Started"
    in_progress = "In Progress"
    on_hold = "On Hold"
    completed = "Completed"


class ProjectMember(IdMixin, Base):
    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_member"),)

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id"), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    user: Mapped["User"] = relationship("User", lazy="joined")


class Project(IdMixin, TimestampMixin, Base):
    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(
            ProjectStatus,
            native_enum=False,
            length=32,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=ProjectStatus.not_started,
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Fixed at creation; nothing updates it.
    creator_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    creator: Mapped["User"] = relationship("User", lazy="joined")

    members: Mapped[List[ProjectMember]] = relationship(
        ProjectMember,
        order_by=ProjectMember.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    # Top-level updates only; comments hang off their parent update.
    updates: Mapped[List["Update"]] = relationship(
        "Update",
        primaryjoin="and_(Project.id == Update.project_id, Update.parent_update_id.is_(None))",
        order_by="Update.position",
        collection_class=ordering_list("position"),
    )

    @property
    def member_ids(self) -> List[str]:
        return [entry.user_id for entry in self.members]

    def __repr__(self) -> str:
        return f"<Project id={self.id} name={self.name!r} status={self.status.value}>"
