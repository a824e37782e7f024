"""Review submission flow."""

import logging
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models import ActivityType, Project, Review, Team, User
from ..schemas.review import ReviewResponse, SubmitReviewRequest
from .activity_recorder import ActivityRecorder
from .github_client import GitHubClient
from .review_store import ReviewStore
from .rooms import RoomRegistry
from .team_resolver import TeamMembershipResolver

logger = logging.getLogger(__name__)

REVIEW_SUBMITTED_EVENT = "review-submitted"


class ReviewCoordinator:
    """Validates a review submission, stores it, and notifies the side channels."""

    def __init__(
        self,
        session: AsyncSession,
        rooms: RoomRegistry,
        activity: ActivityRecorder,
        github_factory: Callable[[int | None], GitHubClient] = GitHubClient,
        broadcast_reviews: bool | None = None,
    ):
        self.session = session
        self.rooms = rooms
        self.activity = activity
        self.github_factory = github_factory
        self.broadcast_reviews = (
            settings.broadcast_review_events if broadcast_reviews is None else broadcast_reviews
        )
        self.store = ReviewStore(session)
        self.resolver = TeamMembershipResolver(session)

    async def submit(
        self,
        user: User,
        project: Project,
        pull_request_number: int,
        request: SubmitReviewRequest,
    ) -> Review:
        """
        Submit or replace the user's review of a pull request.

        Steps:
        1. Check the team exists, the user is in it and it is assigned to the project
        2. Confirm the pull request exists on GitHub
        3. Upsert the review
        4. Record activity (background) and optionally broadcast to the room
        """
        team = await self.session.get(Team, request.team_id)
        if not team:
            raise NotFoundError("Team not found")

        if not await self.resolver.is_member(team.id, user.id):
            raise ForbiddenError("You must be a member of the team to submit a review")

        if not await self.resolver.is_team_assigned(project.id, team.id):
            raise ForbiddenError("This team is not assigned to the project")

        if not project.has_repository:
            raise ValidationError("Project has no GitHub repository configured")

        async with self.github_factory(project.github_installation_id) as gh:
            pr = await gh.get_pull_request(
                project.github_owner, project.github_repo, pull_request_number
            )

        # A retried upsert rolls the session back and expires every loaded
        # instance, so read what the side channels need first
        user_id, username = user.id, user.username
        project_id, project_name = project.id, project.name
        team_id, team_name = team.id, team.name

        review = await self.store.submit_review(
            reviewer_id=user_id,
            project_id=project_id,
            pull_request_number=pull_request_number,
            team_id=team_id,
            approved=request.approved,
            comment=request.comment,
            pull_request_id=pr.get("id"),
        )
        logger.info(
            f"User {username} {'approved' if review.approved else 'rejected'} "
            f"project {project_id} PR #{pull_request_number} for team {team_name}"
        )

        self.activity.record(
            user_id,
            ActivityType.PR_APPROVAL if review.approved else ActivityType.PR_REJECTION,
            project_id=project_id,
            team_id=team_id,
            pull_request_number=pull_request_number,
            title=pr.get("title"),
            details={"projectName": project_name, "teamName": team_name},
        )

        if self.broadcast_reviews:
            await self.rooms.broadcast_to_pull_request(
                project_id,
                pull_request_number,
                REVIEW_SUBMITTED_EVENT,
                ReviewResponse.model_validate(review),
            )

        return review
