"""Pull request discussion comments with live room updates."""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models import DELETED_PLACEHOLDER, ActivityType, Comment, Project, User
from ..schemas.comment import (
    CommentResponse,
    CreateCommentRequest,
    FileLocation,
    ParentCommentSummary,
)
from ..schemas.common import UserSummary
from .activity_recorder import ActivityRecorder
from .rooms import RoomRegistry

logger = logging.getLogger(__name__)

COMMENT_ADDED_EVENT = "comment-added"
COMMENT_UPDATED_EVENT = "comment-updated"
COMMENT_DELETED_EVENT = "comment-deleted"


def comment_to_response(comment: Comment) -> CommentResponse:
    """Build the API/event shape of a comment (user and parent must be loaded)."""
    file_location = None
    if comment.file_path:
        file_location = FileLocation(path=comment.file_path, line=comment.file_line)

    parent = None
    if comment.parent is not None:
        parent = ParentCommentSummary(
            id=comment.parent.id,
            content=comment.parent.content,
            is_deleted=comment.parent.is_deleted,
            user=UserSummary.model_validate(comment.parent.user),
        )

    return CommentResponse(
        id=comment.id,
        user=UserSummary.model_validate(comment.user),
        project_id=comment.project_id,
        pull_request_number=comment.pull_request_number,
        content=comment.content,
        file_location=file_location,
        parent_comment=parent,
        is_edited=comment.is_edited,
        is_deleted=comment.is_deleted,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


class CommentService:
    """Create, edit, tombstone and list comments; every write is broadcast to the room."""

    def __init__(self, session: AsyncSession, rooms: RoomRegistry, activity: ActivityRecorder):
        self.session = session
        self.rooms = rooms
        self.activity = activity

    def _query(self):
        return (
            select(Comment)
            .options(
                selectinload(Comment.user),
                selectinload(Comment.parent).selectinload(Comment.user),
            )
            .execution_options(populate_existing=True)
        )

    async def _load(self, comment_id: int) -> Comment:
        result = await self.session.execute(self._query().where(Comment.id == comment_id))
        comment = result.scalar_one_or_none()
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    async def get(self, comment_id: int) -> Comment:
        """A comment by id, tombstones included."""
        return await self._load(comment_id)

    async def _load_owned(self, user: User, comment_id: int, action: str) -> Comment:
        comment = await self.session.get(Comment, comment_id)
        if comment is None or comment.is_deleted:
            raise NotFoundError("Comment not found")
        if comment.user_id != user.id:
            raise ForbiddenError(f"You can only {action} your own comments")
        return comment

    async def list_for_pull_request(
        self,
        project_id: int,
        pull_request_number: int,
    ) -> list[Comment]:
        """Live comments of a pull request in posting order (tombstones filtered)."""
        result = await self.session.execute(
            self._query()
            .where(
                Comment.project_id == project_id,
                Comment.pull_request_number == pull_request_number,
                Comment.is_deleted.is_(False),
            )
            .order_by(Comment.created_at, Comment.id)
        )
        return list(result.scalars().all())

    async def list_replies(self, comment_id: int) -> list[Comment]:
        result = await self.session.execute(
            self._query()
            .where(Comment.parent_id == comment_id, Comment.is_deleted.is_(False))
            .order_by(Comment.created_at, Comment.id)
        )
        return list(result.scalars().all())

    async def create(
        self,
        user: User,
        project: Project,
        pull_request_number: int,
        request: CreateCommentRequest,
    ) -> Comment:
        if request.parent_comment is not None:
            parent = await self.session.get(Comment, request.parent_comment)
            if parent is None:
                raise NotFoundError("Parent comment not found")
            if (parent.project_id, parent.pull_request_number) != (
                project.id,
                pull_request_number,
            ):
                raise ValidationError("Parent comment belongs to a different pull request")

        comment = Comment(
            user_id=user.id,
            project_id=project.id,
            pull_request_number=pull_request_number,
            content=request.content,
            file_path=request.file_location.path if request.file_location else None,
            file_line=request.file_location.line if request.file_location else None,
            parent_id=request.parent_comment,
        )
        self.session.add(comment)
        await self.session.commit()

        comment = await self._load(comment.id)
        logger.info(
            f"Comment {comment.id} created on project {project.id} PR #{pull_request_number} "
            f"by {user.username}"
        )

        self.activity.record(
            user.id,
            ActivityType.PR_COMMENT,
            project_id=project.id,
            pull_request_number=pull_request_number,
            details={
                "isReply": request.parent_comment is not None,
                "hasFileLocation": request.file_location is not None,
                "contentLength": len(request.content),
            },
        )
        await self.rooms.broadcast_to_pull_request(
            project.id,
            pull_request_number,
            COMMENT_ADDED_EVENT,
            comment_to_response(comment),
        )
        return comment

    async def update(self, user: User, comment_id: int, content: str) -> Comment:
        comment = await self._load_owned(user, comment_id, "edit")

        comment.content = content
        comment.is_edited = True
        comment.updated_at = datetime.now(timezone.utc)
        await self.session.commit()

        comment = await self._load(comment_id)
        await self.rooms.broadcast_to_pull_request(
            comment.project_id,
            comment.pull_request_number,
            COMMENT_UPDATED_EVENT,
            comment_to_response(comment),
        )
        return comment

    async def delete(self, user: User, comment_id: int) -> None:
        """Tombstone a comment. The row stays so replies keep their parent."""
        comment = await self._load_owned(user, comment_id, "delete")
        project_id, pull_request_number = comment.project_id, comment.pull_request_number

        comment.is_deleted = True
        comment.content = DELETED_PLACEHOLDER
        comment.updated_at = datetime.now(timezone.utc)
        await self.session.commit()

        logger.info(f"Comment {comment_id} deleted by {user.username}")
        await self.rooms.broadcast_to_pull_request(
            project_id,
            pull_request_number,
            COMMENT_DELETED_EVENT,
            {"commentId": comment_id},
        )
