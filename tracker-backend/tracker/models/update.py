# File: tracker/models/update.py

"""
Update model.

An Update is a note posted on a project. Comments are Updates too, with
kind=comment and parent_update_id pointing at the update they answer.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker.models.base import Base, IdMixin, TimestampMixin, utcnow

if TYPE_CHECKING:
    from tracker.models.user import User


class UpdateKind(str, enum.Enum):
    update = "update"
    comment = "comment"


class Attachment(IdMixin, Base):
    __tablename__ = "attachments"

    update_id: Mapped[str] = mapped_column(ForeignKey("updates.id"), index=True, nullable=False)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    # Path as returned by the storage layer
    path: Mapped[str] = mapped_column(String(1024), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class Update(IdMixin, TimestampMixin, Base):
    __tablename__ = "updates"

    project_id: Mapped[str] = mapped_column(ForeignKey("projects.id"), index=True, nullable=False)
    author_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[UpdateKind] = mapped_column(
        Enum(UpdateKind, native_enum=False, length=16),
        default=UpdateKind.update,
        nullable=False,
    )
    parent_update_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("updates.id"), index=True, nullable=True
    )
    # Index within the owning list: the project's updates, or the parent's comments
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    author: Mapped["User"] = relationship("User", lazy="joined")

    attachments: Mapped[List[Attachment]] = relationship(
        Attachment,
        order_by=Attachment.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    comments: Mapped[List["Update"]] = relationship(
        "Update",
        order_by="Update.position",
        collection_class=ordering_list("position"),
    )

    def __repr__(self) -> str:
        return f"<Update id={self.id} project_id={self.project_id} kind={self.kind.value}>"
