"""Review, approval status and merge endpoints."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..models import Project, User
from ..schemas.review import (
    ApprovalStatus,
    MergeRequest,
    MergeResponse,
    ReviewResponse,
    SubmitReviewRequest,
    UserReviewResponse,
)
from ..services.activity_recorder import ActivityRecorder
from ..services.approval import compute_approval_status
from ..services.github_client import GitHubClient
from ..services.merge_gate import MergeGate
from ..services.review_store import ReviewStore
from ..services.reviews import ReviewCoordinator
from ..services.rooms import RoomRegistry, get_room_registry
from .deps import (
    get_activity_recorder,
    get_current_user,
    get_github_factory,
    require_project_access,
)

router = APIRouter(prefix="/projects/{project_id}/pulls/{pull_number}", tags=["reviews"])

PullNumber = Annotated[int, Path(ge=1, description="Pull request number")]


@router.get("/reviews", response_model=list[ReviewResponse])
async def list_reviews(
    pull_number: PullNumber,
    project: Project = Depends(require_project_access),
    session: AsyncSession = Depends(get_session),
) -> list[ReviewResponse]:
    """All reviews of a pull request."""
    reviews = await ReviewStore(session).list_reviews(project.id, pull_number)
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.get("/reviews/user", response_model=UserReviewResponse)
async def get_user_review(
    pull_number: PullNumber,
    project: Project = Depends(require_project_access),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> UserReviewResponse:
    """The current user's review of a pull request."""
    review = await ReviewStore(session).get_user_review(user.id, project.id, pull_number)
    if review is None:
        return UserReviewResponse(exists=False)
    return UserReviewResponse(exists=True, review=ReviewResponse.model_validate(review))


@router.post("/reviews", response_model=ReviewResponse)
async def submit_review(
    request: SubmitReviewRequest,
    pull_number: PullNumber,
    project: Project = Depends(require_project_access),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    rooms: RoomRegistry = Depends(get_room_registry),
    activity: ActivityRecorder = Depends(get_activity_recorder),
    github_factory: Callable[[int | None], GitHubClient] = Depends(get_github_factory),
) -> ReviewResponse:
    """Approve or reject a pull request on behalf of one of the user's teams."""
    coordinator = ReviewCoordinator(session, rooms, activity, github_factory=github_factory)
    review = await coordinator.submit(user, project, pull_number, request)
    return ReviewResponse.model_validate(review)


@router.get("/status", response_model=ApprovalStatus)
async def get_approval_status(
    pull_number: PullNumber,
    project: Project = Depends(require_project_access),
    session: AsyncSession = Depends(get_session),
) -> ApprovalStatus:
    """Whether every assigned team has approved, with the per-team breakdown."""
    return await compute_approval_status(session, project.id, pull_number)


@router.post("/merge", response_model=MergeResponse)
async def merge_pull_request(
    pull_number: PullNumber,
    request: MergeRequest | None = None,
    project: Project = Depends(require_project_access),
    session: AsyncSession = Depends(get_session),
    github_factory: Callable[[int | None], GitHubClient] = Depends(get_github_factory),
) -> MergeResponse:
    """Merge on GitHub once every assigned team has approved."""
    gate = MergeGate(session, github_factory=github_factory)
    return await gate.attempt_merge(project, pull_number, request or MergeRequest())
