"""Merge gate: the only path from team consensus to a real merge."""

import logging
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotApprovedError, ValidationError
from ..models import Project
from ..schemas.review import MergeRequest, MergeResponse
from .approval import compute_approval_status
from .github_client import GitHubClient

logger = logging.getLogger(__name__)


class MergeGate:
    """Re-checks approvals and, only if every team agrees, asks GitHub to merge.

    GitHub is the source of truth for whether the merge happened; nothing is
    marked merged locally. Failed merges are not retried (a repeated squash
    could apply twice), the caller has to resubmit.
    """

    def __init__(
        self,
        session: AsyncSession,
        github_factory: Callable[[int | None], GitHubClient] = GitHubClient,
    ):
        self.session = session
        self.github_factory = github_factory

    async def attempt_merge(
        self,
        project: Project,
        pull_request_number: int,
        options: MergeRequest,
    ) -> MergeResponse:
        status = await compute_approval_status(self.session, project.id, pull_request_number)
        if not status.can_merge:
            waiting = [t.team_name for t in status.team_approvals if not t.approved]
            logger.info(
                f"Refusing merge of project {project.id} PR #{pull_request_number}: "
                f"waiting on {waiting or 'team assignment'}"
            )
            raise NotApprovedError(status)

        if not project.has_repository:
            raise ValidationError("Project has no GitHub repository configured")

        logger.info(
            f"Merging {project.github_owner}/{project.github_repo}#{pull_request_number} "
            f"(method={options.merge_method})"
        )
        async with self.github_factory(project.github_installation_id) as gh:
            data = await gh.merge_pull_request(
                project.github_owner,
                project.github_repo,
                pull_request_number,
                merge_method=options.merge_method,
                commit_title=options.commit_title,
                commit_message=options.commit_message,
            )

        return MergeResponse(
            merged=data.get("merged", False),
            message=data.get("message"),
            sha=data.get("sha"),
        )
