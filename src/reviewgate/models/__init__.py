"""Database models."""

from .activity import ActivityType, UserActivity
from .base import Base
from .comment import DELETED_PLACEHOLDER, Comment
from .project import AccessLevel, Project, ProjectTeam
from .review import Review
from .team import Team, TeamMember, TeamRole
from .user import User

__all__ = [
    "DELETED_PLACEHOLDER",
    "AccessLevel",
    "ActivityType",
    "Base",
    "Comment",
    "Project",
    "ProjectTeam",
    "Review",
    "Team",
    "TeamMember",
    "TeamRole",
    "User",
    "UserActivity",
]
