"""Best-effort audit trail of user actions.

Recording happens after the primary write has committed and never blocks or
fails the request that triggered it: ``record`` schedules delivery in the
background and delivery errors are logged and dropped.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import ActivityType, UserActivity

logger = logging.getLogger(__name__)


@dataclass
class ActivityEntry:
    """An activity waiting to be written."""

    user_id: int
    activity_type: str
    project_id: int | None = None
    team_id: int | None = None
    pull_request_number: int | None = None
    title: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def as_job_kwargs(self) -> dict[str, Any]:
        return asdict(self)


ActivitySink = Callable[[ActivityEntry], Awaitable[None]]


class ActivityRecorder:
    """Fire-and-forget front for an activity sink."""

    def __init__(self, sink: ActivitySink):
        self._sink = sink
        self._pending: set[asyncio.Task] = set()

    def record(
        self,
        user_id: int,
        activity_type: ActivityType,
        *,
        project_id: int | None = None,
        team_id: int | None = None,
        pull_request_number: int | None = None,
        title: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Schedule an activity write. Never raises."""
        try:
            entry = ActivityEntry(
                user_id=user_id,
                activity_type=ActivityType(activity_type).value,
                project_id=project_id,
                team_id=team_id,
                pull_request_number=pull_request_number,
                title=title,
                details=details or {},
            )
            task = asyncio.get_running_loop().create_task(self._deliver(entry))
        except Exception:
            logger.exception(f"Could not schedule {activity_type} activity for user {user_id}")
            return

        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, entry: ActivityEntry) -> None:
        try:
            await self._sink(entry)
        except Exception:
            logger.exception(
                f"Dropping {entry.activity_type} activity for user {entry.user_id}"
            )

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for scheduled deliveries (shutdown and tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


async def save_activity(session: AsyncSession, entry: ActivityEntry) -> UserActivity:
    """Write an activity row."""
    activity = UserActivity(
        user_id=entry.user_id,
        activity_type=ActivityType(entry.activity_type),
        project_id=entry.project_id,
        team_id=entry.team_id,
        pull_request_number=entry.pull_request_number,
        title=entry.title,
        details=entry.details or None,
    )
    session.add(activity)
    await session.commit()
    return activity
