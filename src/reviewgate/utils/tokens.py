"""Access token verification for HTTP and WebSocket callers."""

import time

import jwt

from ..config import settings


class InvalidTokenError(Exception):
    """The bearer token is missing, expired or malformed."""


def decode_access_token(token: str | None) -> int:
    """Verify a bearer token and return the user id in its ``sub`` (or ``id``) claim."""
    if not token:
        raise InvalidTokenError("Token not provided")

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError as e:
        raise InvalidTokenError(str(e)) from e

    subject = payload.get("sub", payload.get("id"))
    try:
        return int(subject)
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("Token has no valid subject") from e


def create_access_token(user_id: int, expires_in_seconds: int = 3600) -> str:
    """Issue a short-lived token (used by tests and local tooling)."""
    now = int(time.time())
    payload = {"sub": str(user_id), "iat": now, "exp": now + expires_in_seconds}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
