"""Comment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_session
from ..models import Project, User
from ..schemas.comment import CommentResponse, CreateCommentRequest, UpdateCommentRequest
from ..services.activity_recorder import ActivityRecorder
from ..services.comments import CommentService, comment_to_response
from ..services.rooms import RoomRegistry, get_room_registry
from .deps import (
    check_project_access,
    get_activity_recorder,
    get_current_user,
    require_project_access,
)

router = APIRouter(tags=["comments"])

PullNumber = Annotated[int, Path(ge=1, description="Pull request number")]


def get_comment_service(
    session: AsyncSession = Depends(get_session),
    rooms: RoomRegistry = Depends(get_room_registry),
    activity: ActivityRecorder = Depends(get_activity_recorder),
) -> CommentService:
    return CommentService(session, rooms, activity)


@router.get(
    "/projects/{project_id}/pulls/{pull_number}/comments",
    response_model=list[CommentResponse],
)
async def list_comments(
    pull_number: PullNumber,
    project: Project = Depends(require_project_access),
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> list[CommentResponse]:
    """Comments on a pull request, oldest first."""
    comments = await service.list_for_pull_request(project.id, pull_number)
    return [comment_to_response(c) for c in comments]


@router.post(
    "/projects/{project_id}/pulls/{pull_number}/comments",
    response_model=CommentResponse,
    status_code=201,
)
async def create_comment(
    request: CreateCommentRequest,
    pull_number: PullNumber,
    project: Project = Depends(require_project_access),
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    """Post a comment or a reply; everyone viewing the pull request gets comment-added."""
    comment = await service.create(user, project, pull_number, request)
    return comment_to_response(comment)


@router.put("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    request: UpdateCommentRequest,
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    """Edit one of your own comments."""
    comment = await service.update(user, comment_id, request.content)
    return comment_to_response(comment)


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: int,
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> dict:
    """Delete one of your own comments (tombstone)."""
    await service.delete(user, comment_id)
    return {"message": "Comment deleted successfully"}


@router.get("/comments/{comment_id}/replies", response_model=list[CommentResponse])
async def list_replies(
    comment_id: int,
    user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> list[CommentResponse]:
    """Live replies to a comment; needs the same project access as the thread."""
    parent = await service.get(comment_id)
    await check_project_access(service.session, user, parent.project_id)
    replies = await service.list_replies(parent.id)
    return [comment_to_response(c) for c in replies]
