"""Review, approval and merge schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from .common import ApiModel, TeamSummary, UserSummary


class SubmitReviewRequest(ApiModel):
    """Approve or reject a pull request on behalf of a team."""

    team_id: int
    approved: bool
    comment: str | None = None


class ReviewResponse(ApiModel):
    """A stored review with reviewer and team populated."""

    id: int
    user: UserSummary
    team: TeamSummary
    project_id: int
    pull_request_number: int
    pull_request_id: int | None
    approved: bool
    comment: str | None
    created_at: datetime
    updated_at: datetime


class UserReviewResponse(ApiModel):
    """The current user's review of a pull request, if any."""

    exists: bool
    review: ReviewResponse | None = None


class Approver(ApiModel):
    """A member whose approval satisfied a team."""

    user_id: int
    username: str
    name: str


class TeamApprovalStatus(ApiModel):
    """Approval state of one assigned team."""

    team_id: int
    team_name: str
    approved: bool
    approvers: list[Approver] = Field(default_factory=list)


class ApprovalStatus(ApiModel):
    """Mergeability of a pull request with the per-team breakdown."""

    can_merge: bool
    message: str
    team_approvals: list[TeamApprovalStatus]


class MergeRequest(ApiModel):
    """Options for merging a pull request."""

    merge_method: Literal["merge", "squash", "rebase"] = "merge"
    commit_title: str | None = None
    commit_message: str | None = None


class MergeResponse(ApiModel):
    """Outcome reported by GitHub for a merge."""

    merged: bool
    message: str | None = None
    sha: str | None = None
