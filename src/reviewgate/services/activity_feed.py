"""Reads over the activity trail."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import TeamMember, UserActivity

TIMEFRAMES: dict[str, timedelta | None] = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "all": None,
}


def _feed_query(timeframe: str, limit: int):
    query = (
        select(UserActivity)
        .options(selectinload(UserActivity.user))
        .order_by(UserActivity.created_at.desc(), UserActivity.id.desc())
        .limit(limit)
    )

    window = TIMEFRAMES.get(timeframe, TIMEFRAMES["week"])
    if window is not None:
        query = query.where(UserActivity.created_at >= datetime.now(timezone.utc) - window)
    return query


async def get_user_activity_feed(
    session: AsyncSession,
    user_id: int,
    timeframe: str = "week",
    limit: int = 20,
) -> list[UserActivity]:
    """Newest-first activity of a user within the timeframe."""
    query = _feed_query(timeframe, limit).where(UserActivity.user_id == user_id)
    result = await session.execute(query)
    return list(result.scalars().all())


async def get_team_activity_feed(
    session: AsyncSession,
    team_id: int,
    timeframe: str = "week",
    limit: int = 50,
) -> list[UserActivity]:
    """Newest-first activity of the team's current members, whatever project it touched."""
    members = select(TeamMember.user_id).where(TeamMember.team_id == team_id)
    query = _feed_query(timeframe, limit).where(UserActivity.user_id.in_(members))
    result = await session.execute(query)
    return list(result.scalars().all())
