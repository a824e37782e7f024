"""Business logic services."""

from .activity_feed import get_team_activity_feed, get_user_activity_feed
from .activity_recorder import ActivityEntry, ActivityRecorder, save_activity
from .approval import Approval, compute_approval_status, fold_approvals
from .comments import CommentService, comment_to_response
from .github_client import GitHubClient
from .merge_gate import MergeGate
from .review_store import ReviewStore
from .reviews import ReviewCoordinator
from .rooms import Connection, RoomRegistry, get_room_registry, room_key, room_registry
from .team_resolver import TeamMembershipResolver, TeamRef

__all__ = [
    "ActivityEntry",
    "ActivityRecorder",
    "Approval",
    "CommentService",
    "Connection",
    "GitHubClient",
    "MergeGate",
    "ReviewCoordinator",
    "ReviewStore",
    "RoomRegistry",
    "TeamMembershipResolver",
    "TeamRef",
    "comment_to_response",
    "compute_approval_status",
    "fold_approvals",
    "get_room_registry",
    "get_team_activity_feed",
    "get_user_activity_feed",
    "room_key",
    "room_registry",
    "save_activity",
]
