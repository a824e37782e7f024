"""Team-gated approval aggregation.

A pull request is mergeable once every team assigned to its project has at
least one approving review from a member reviewing on that team's behalf.
Rejections never block on their own, and a project without assigned teams is
never mergeable.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.review import ApprovalStatus, Approver, TeamApprovalStatus
from .review_store import ReviewStore
from .team_resolver import TeamMembershipResolver, TeamRef

NO_TEAMS_MESSAGE = "Project has no teams assigned"
ALL_APPROVED_MESSAGE = "All teams have approved this pull request"
WAITING_MESSAGE = "Waiting for approvals from some teams"


@dataclass(frozen=True)
class Approval:
    """The parts of an approving review the fold needs."""

    team_id: int
    user_id: int
    username: str
    name: str


def fold_approvals(teams: Iterable[TeamRef], approvals: Iterable[Approval]) -> ApprovalStatus:
    """Combine assigned teams and approving reviews into an ApprovalStatus.

    Teams are deduplicated by id (first occurrence wins); approvals for teams
    not in ``teams`` are ignored.
    """
    statuses: dict[int, TeamApprovalStatus] = {}
    for team in teams:
        if team.team_id not in statuses:
            statuses[team.team_id] = TeamApprovalStatus(
                team_id=team.team_id,
                team_name=team.name,
                approved=False,
                approvers=[],
            )

    if not statuses:
        return ApprovalStatus(can_merge=False, message=NO_TEAMS_MESSAGE, team_approvals=[])

    for approval in approvals:
        status = statuses.get(approval.team_id)
        if status is None:
            continue
        status.approved = True
        status.approvers.append(
            Approver(user_id=approval.user_id, username=approval.username, name=approval.name)
        )

    can_merge = all(status.approved for status in statuses.values())
    return ApprovalStatus(
        can_merge=can_merge,
        message=ALL_APPROVED_MESSAGE if can_merge else WAITING_MESSAGE,
        team_approvals=list(statuses.values()),
    )


async def compute_approval_status(
    session: AsyncSession,
    project_id: int,
    pull_request_number: int,
) -> ApprovalStatus:
    """Load current teams and approving reviews and fold them. Never cached."""
    teams = await TeamMembershipResolver(session).get_teams_for_project(project_id)
    if not teams:
        return fold_approvals([], [])

    reviews = await ReviewStore(session).list_reviews(
        project_id, pull_request_number, approved=True
    )
    approvals = [
        Approval(
            team_id=review.team_id,
            user_id=review.user_id,
            username=review.user.username,
            name=review.user.display_name,
        )
        for review in reviews
    ]
    return fold_approvals(teams, approvals)
