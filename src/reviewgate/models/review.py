"""Pull request review model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .project import Project
    from .team import Team
    from .user import User


class Review(Base):
    """One reviewer's approve/reject decision on a pull request.

    At most one row exists per (user, project, pull request number); a
    resubmission overwrites team, decision and comment in place.
    """

    __tablename__ = "pr_reviews"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "project_id",
            "pull_request_number",
            name="uq_review_user_project_pr",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        index=True,
    )
    team_id: Mapped[int] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"),
        index=True,
    )

    # PR info
    pull_request_number: Mapped[int] = mapped_column(Integer, index=True)
    pull_request_id: Mapped[int | None] = mapped_column(
        BigInteger,
        nullable=True,
    )  # GitHub's PR ID

    # Decision
    approved: Mapped[bool] = mapped_column(Boolean)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    # Relationships
    user: Mapped["User"] = relationship()
    project: Mapped["Project"] = relationship()
    team: Mapped["Team"] = relationship()
