"""Project model and team assignments."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .team import Team


class AccessLevel(str, Enum):
    """Access a team has on a project."""

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class Project(Base):
    """A project backed by a GitHub repository."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    key: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # GitHub repository coordinates
    github_owner: Mapped[str | None] = mapped_column(String(255), nullable=True)
    github_repo: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # App installation (null = use the configured token)
    github_installation_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    team_assignments: Mapped[list["ProjectTeam"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectTeam.id",
    )

    @property
    def has_repository(self) -> bool:
        return bool(self.github_owner and self.github_repo)


class ProjectTeam(Base):
    """A team assigned to a project, with its access level."""

    __tablename__ = "project_teams"
    __table_args__ = (
        UniqueConstraint("project_id", "team_id", name="uq_project_team"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        index=True,
    )
    team_id: Mapped[int] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"),
        index=True,
    )
    access_level: Mapped[AccessLevel] = mapped_column(
        SQLEnum(AccessLevel),
        default=AccessLevel.READ,
    )

    project: Mapped["Project"] = relationship(back_populates="team_assignments")
    team: Mapped["Team"] = relationship()
