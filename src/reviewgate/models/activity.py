"""User activity (audit trail) model."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .user import User


class ActivityType(str, Enum):
    """Kinds of recorded user activity."""

    PR_APPROVAL = "pr_approval"
    PR_REJECTION = "pr_rejection"
    PR_COMMENT = "pr_comment"
    PROJECT_CREATION = "project_creation"
    TEAM_JOIN = "team_join"
    LOGIN = "login"


class UserActivity(Base):
    """An audit entry for something a user did."""

    __tablename__ = "user_activities"
    __table_args__ = (
        Index("ix_user_activities_user_created", "user_id", "created_at"),
        Index("ix_user_activities_project_created", "project_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    activity_type: Mapped[ActivityType] = mapped_column(SQLEnum(ActivityType))

    # Related entities (no FKs: audit rows outlive what they point at)
    project_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    team_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    pull_request_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)

    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    user: Mapped["User"] = relationship()
