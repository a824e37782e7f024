"""Activity feed schemas."""

from datetime import datetime

from ..models import ActivityType
from .common import ApiModel, UserSummary


class ActivityResponse(ApiModel):
    """One entry of a user's activity feed."""

    id: int
    activity_type: ActivityType
    user: UserSummary
    project_id: int | None
    team_id: int | None
    pull_request_number: int | None
    title: str | None
    details: dict | None
    created_at: datetime


class ActivityFeedResponse(ApiModel):
    """A page of activity."""

    activities: list[ActivityResponse]
    timeframe: str
