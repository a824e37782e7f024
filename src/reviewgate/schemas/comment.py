"""Comment schemas."""

from datetime import datetime

from pydantic import Field

from .common import ApiModel, UserSummary


class FileLocation(ApiModel):
    """Where in the diff a comment is anchored."""

    path: str
    line: int | None = None


class CreateCommentRequest(ApiModel):
    """New comment or reply."""

    content: str = Field(..., min_length=1)
    file_location: FileLocation | None = None
    parent_comment: int | None = None


class UpdateCommentRequest(ApiModel):
    """Edit of an existing comment."""

    content: str = Field(..., min_length=1)


class ParentCommentSummary(ApiModel):
    """The comment a reply points at."""

    id: int
    content: str
    is_deleted: bool
    user: UserSummary


class CommentResponse(ApiModel):
    """A comment as returned by the API and carried on room events."""

    id: int
    user: UserSummary
    project_id: int
    pull_request_number: int
    content: str
    file_location: FileLocation | None = None
    parent_comment: ParentCommentSummary | None = None
    is_edited: bool
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
