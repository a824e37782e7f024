"""Pydantic schemas for API validation."""

from .activity import ActivityFeedResponse, ActivityResponse
from .comment import (
    CommentResponse,
    CreateCommentRequest,
    FileLocation,
    ParentCommentSummary,
    UpdateCommentRequest,
)
from .common import ApiModel, TeamSummary, UserSummary
from .realtime import ClientMessage, RoomTarget
from .review import (
    ApprovalStatus,
    Approver,
    MergeRequest,
    MergeResponse,
    ReviewResponse,
    SubmitReviewRequest,
    TeamApprovalStatus,
    UserReviewResponse,
)

__all__ = [
    "ActivityFeedResponse",
    "ActivityResponse",
    "ApiModel",
    "ApprovalStatus",
    "Approver",
    "ClientMessage",
    "CommentResponse",
    "CreateCommentRequest",
    "FileLocation",
    "MergeRequest",
    "MergeResponse",
    "ParentCommentSummary",
    "ReviewResponse",
    "RoomTarget",
    "SubmitReviewRequest",
    "TeamApprovalStatus",
    "TeamSummary",
    "UpdateCommentRequest",
    "UserReviewResponse",
    "UserSummary",
]
