"""Persistence for pull request reviews (one per reviewer per pull request)."""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..errors import ConflictError
from ..models import Review

logger = logging.getLogger(__name__)

REVIEW_KEY = ("user_id", "project_id", "pull_request_number")

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ReviewStore:
    """Upserts and reads Review rows.

    Uniqueness of (user, project, pull request number) is enforced by the
    ``uq_review_user_project_pr`` constraint; the upsert relies on it instead
    of any in-process locking.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def submit_review(
        self,
        reviewer_id: int,
        project_id: int,
        pull_request_number: int,
        team_id: int,
        approved: bool,
        comment: str | None = None,
        pull_request_id: int | None = None,
    ) -> Review:
        """
        Create or overwrite the reviewer's review of a pull request.

        The caller must already have checked that the reviewer belongs to the
        team and that the team is assigned to the project.
        """
        for attempt in (1, 2):
            try:
                await self._upsert(
                    reviewer_id,
                    project_id,
                    pull_request_number,
                    team_id,
                    approved,
                    comment,
                    pull_request_id,
                )
                await self.session.commit()
                break
            except IntegrityError as e:
                await self.session.rollback()
                if attempt == 2:
                    raise ConflictError(
                        "Review could not be saved due to a concurrent update"
                    ) from e
                logger.warning(
                    f"Review upsert for user {reviewer_id} on project {project_id} "
                    f"PR #{pull_request_number} hit a uniqueness race, retrying"
                )

        review = await self.get_user_review(reviewer_id, project_id, pull_request_number)
        assert review is not None
        return review

    async def _upsert(
        self,
        reviewer_id: int,
        project_id: int,
        pull_request_number: int,
        team_id: int,
        approved: bool,
        comment: str | None,
        pull_request_id: int | None,
    ) -> None:
        dialect = self.session.get_bind().dialect.name
        try:
            insert = _INSERTS[dialect]
        except KeyError:
            raise RuntimeError(f"Review upsert is not supported on {dialect}") from None

        now = datetime.now(timezone.utc)
        stmt = insert(Review).values(
            user_id=reviewer_id,
            project_id=project_id,
            pull_request_number=pull_request_number,
            team_id=team_id,
            pull_request_id=pull_request_id,
            approved=approved,
            comment=comment,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=list(REVIEW_KEY),
            set_={
                "team_id": stmt.excluded.team_id,
                "approved": stmt.excluded.approved,
                "comment": stmt.excluded.comment,
                "pull_request_id": func.coalesce(
                    stmt.excluded.pull_request_id, Review.pull_request_id
                ),
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)

    async def get_user_review(
        self,
        reviewer_id: int,
        project_id: int,
        pull_request_number: int,
    ) -> Review | None:
        """The reviewer's review of a pull request, with user and team loaded."""
        result = await self.session.execute(
            select(Review)
            .options(selectinload(Review.user), selectinload(Review.team))
            .where(
                Review.user_id == reviewer_id,
                Review.project_id == project_id,
                Review.pull_request_number == pull_request_number,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_reviews(
        self,
        project_id: int,
        pull_request_number: int,
        approved: bool | None = None,
    ) -> list[Review]:
        """All reviews of a pull request, oldest decision first."""
        query = (
            select(Review)
            .options(selectinload(Review.user), selectinload(Review.team))
            .where(
                Review.project_id == project_id,
                Review.pull_request_number == pull_request_number,
            )
            .order_by(Review.updated_at, Review.id)
            .execution_options(populate_existing=True)
        )
        if approved is not None:
            query = query.where(Review.approved == approved)

        result = await self.session.execute(query)
        return list(result.scalars().all())
