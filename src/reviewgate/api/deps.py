"""Shared FastAPI dependencies."""

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..errors import ForbiddenError, NotFoundError
from ..models import Project, User
from ..services.activity_recorder import ActivityRecorder
from ..services.github_client import GitHubClient
from ..services.team_resolver import TeamMembershipResolver
from ..tasks.activity_tasks import defer_activity
from ..utils.tokens import InvalidTokenError, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)

activity_recorder = ActivityRecorder(sink=defer_activity)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> User:
    """Resolve the bearer token to a user or fail with 401."""
    try:
        user_id = decode_access_token(credentials.credentials if credentials else None)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=401,
            detail=f"Authentication error: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    user = await session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Authentication error: User not found")
    return user


async def get_project(
    project_id: int,
    session: AsyncSession = Depends(get_session),
) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise NotFoundError("Project not found")
    return project


async def check_project_access(session: AsyncSession, user: User, project_id: int) -> None:
    """Admins and managers see every project; others need a team assigned to it."""
    if user.is_privileged:
        return
    if not await TeamMembershipResolver(session).has_project_access(project_id, user.id):
        raise ForbiddenError("You do not have access to this project")


async def require_project_access(
    project: Project = Depends(get_project),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> Project:
    await check_project_access(session, user, project.id)
    return project


def get_activity_recorder() -> ActivityRecorder:
    return activity_recorder


def get_github_factory() -> type[GitHubClient]:
    return GitHubClient
