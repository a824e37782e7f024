"""Pull request discussion comment model."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .user import User

DELETED_PLACEHOLDER = "[deleted]"


class Comment(Base):
    """A discussion comment on a pull request.

    Deletion is a tombstone (content redacted, ``is_deleted`` set) so that
    replies keep a valid parent.
    """

    __tablename__ = "pr_comments"
    __table_args__ = (
        Index("ix_pr_comments_project_pr", "project_id", "pull_request_number"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
    )
    pull_request_number: Mapped[int] = mapped_column(Integer)

    content: Mapped[str] = mapped_column(Text)

    # Location (optional)
    file_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
    file_line: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Replies
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("pr_comments.id"),
        nullable=True,
        index=True,
    )

    # Status
    is_edited: Mapped[bool] = mapped_column(Boolean, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    user: Mapped["User"] = relationship()
    parent: Mapped[Optional["Comment"]] = relationship(remote_side=[id])
