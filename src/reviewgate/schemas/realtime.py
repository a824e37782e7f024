"""Messages exchanged on the real-time channel."""

from typing import Any

from pydantic import BaseModel, Field

from .common import ApiModel


class ClientMessage(BaseModel):
    """A frame sent by a client: ``{"event": "join-pr", "data": {...}}``."""

    event: str
    data: dict[str, Any] = Field(default_factory=dict)


class RoomTarget(ApiModel):
    """Payload of join-pr / leave-pr."""

    project_id: int
    pull_number: int = Field(..., ge=1)
