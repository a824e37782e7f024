"""Activity recording jobs."""

import logging
from typing import Any

from ..database import async_session_factory
from ..services.activity_recorder import ActivityEntry, save_activity
from .worker import app

logger = logging.getLogger(__name__)


@app.task(name="record_activity", retry=2)
async def record_activity(
    user_id: int,
    activity_type: str,
    project_id: int | None = None,
    team_id: int | None = None,
    pull_request_number: int | None = None,
    title: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Persist one activity entry."""
    entry = ActivityEntry(
        user_id=user_id,
        activity_type=activity_type,
        project_id=project_id,
        team_id=team_id,
        pull_request_number=pull_request_number,
        title=title,
        details=details or {},
    )
    async with async_session_factory() as session:
        await save_activity(session, entry)
    logger.debug(f"Recorded {activity_type} for user {user_id}")


async def defer_activity(entry: ActivityEntry) -> None:
    """Activity sink that queues the write on the worker."""
    await record_activity.defer_async(**entry.as_job_kwargs())
