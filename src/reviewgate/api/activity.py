"""Activity feed endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_session
from ..errors import ForbiddenError, NotFoundError
from ..models import Team, User
from ..schemas.activity import ActivityFeedResponse, ActivityResponse
from ..services.activity_feed import get_team_activity_feed, get_user_activity_feed
from ..services.team_resolver import TeamMembershipResolver
from .deps import get_current_user

router = APIRouter(prefix="/activity", tags=["activity"])

Timeframe = Literal["day", "week", "month", "all"]


@router.get("/user", response_model=ActivityFeedResponse)
async def user_activity_feed(
    timeframe: Timeframe = "week",
    limit: int | None = Query(None, ge=1),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> ActivityFeedResponse:
    """The current user's recent activity, newest first."""
    limit = min(limit or settings.activity_feed_default_limit, settings.activity_feed_max_limit)
    activities = await get_user_activity_feed(session, user.id, timeframe, limit)
    return ActivityFeedResponse(
        activities=[ActivityResponse.model_validate(a) for a in activities],
        timeframe=timeframe,
    )


@router.get("/team/{team_id}", response_model=ActivityFeedResponse)
async def team_activity_feed(
    team_id: int,
    timeframe: Timeframe = "week",
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> ActivityFeedResponse:
    """Recent activity of everyone on a team, newest first. Members only."""
    team = await session.get(Team, team_id)
    if not team:
        raise NotFoundError("Team not found")
    if not await TeamMembershipResolver(session).is_member(team.id, user.id):
        raise ForbiddenError("You are not a member of this team")

    activities = await get_team_activity_feed(
        session, team.id, timeframe, settings.team_activity_feed_limit
    )
    return ActivityFeedResponse(
        activities=[ActivityResponse.model_validate(a) for a in activities],
        timeframe=timeframe,
    )
