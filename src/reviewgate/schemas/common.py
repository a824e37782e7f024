"""Shared schema base and embedded summaries."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class UserSummary(ApiModel):
    """User fields embedded in reviews, comments and activity."""

    id: int
    username: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None


class TeamSummary(ApiModel):
    """Team fields embedded in reviews."""

    id: int
    name: str
