"""Application configuration using Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - SQLAlchemy (asyncpg)
    database_url: str = Field(
        ...,
        description="SQLAlchemy connection string (postgresql+asyncpg://...)",
    )

    # Database - Procrastinate (psycopg)
    procrastinate_database_url: str = Field(
        ...,
        description="Procrastinate connection string (postgresql://...)",
    )

    # Bearer tokens (issued elsewhere, verified here)
    jwt_secret: str = Field(..., description="Secret used to verify access tokens")
    jwt_algorithm: str = Field("HS256", description="Access token signing algorithm")

    # GitHub
    github_api_url: str = Field("https://api.github.com")
    github_token: str | None = Field(
        None,
        description="Token used for repositories without an App installation",
    )
    github_app_id: int | None = Field(None, description="GitHub App ID")
    github_app_private_key: str | None = Field(
        None,
        description="GitHub App private key (PEM format)",
    )
    github_timeout_seconds: float = Field(
        30.0,
        description="Upper bound for any single call to the GitHub API",
    )

    # Real-time fanout
    broadcast_review_events: bool = Field(
        False,
        description="Emit review-submitted to the pull request room after a review upsert",
    )
    room_send_timeout_seconds: float = Field(
        5.0,
        description="Longest a client may take to accept one room event before it is dropped",
    )

    # Activity feed
    activity_feed_default_limit: int = Field(20)
    activity_feed_max_limit: int = Field(100)
    team_activity_feed_limit: int = Field(50)

    # Server
    host: str = Field("0.0.0.0")
    port: int = Field(8000)
    log_level: str = Field("INFO")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
