"""Error taxonomy surfaced to API callers."""

from typing import Any


class ReviewGateError(Exception):
    """Base class for errors rendered as JSON responses."""

    status_code: int = 500

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, **self.extra}


class NotFoundError(ReviewGateError):
    """Project, team, review or comment missing."""

    status_code = 404


class ForbiddenError(ReviewGateError):
    """Caller is not allowed to act on the resource."""

    status_code = 403


class NotApprovedError(ForbiddenError):
    """Merge refused because not every assigned team has approved."""

    def __init__(self, approval_status: Any):
        super().__init__(
            "Cannot merge this PR. Not all teams have approved it.",
            approvalStatus=approval_status.model_dump(by_alias=True),
        )
        self.approval_status = approval_status


class ConflictError(ReviewGateError):
    """Uniqueness violation the store could not absorb."""

    status_code = 409


class ValidationError(ReviewGateError):
    """Missing or inconsistent request fields."""

    status_code = 400


class UpstreamError(ReviewGateError):
    """A GitHub call failed; status and message are passed through verbatim."""

    def __init__(self, status_code: int, message: str, **extra: Any):
        super().__init__(message, **extra)
        self.status_code = status_code
