"""GitHub App authentication utilities."""

import time

import httpx
import jwt

from ..config import settings

# Cache installation tokens (they last 1 hour)
_token_cache: dict[int, tuple[str, float]] = {}


def generate_app_jwt() -> str:
    """Generate a JWT for GitHub App authentication."""
    if settings.github_app_id is None or not settings.github_app_private_key:
        raise RuntimeError("GitHub App credentials are not configured")

    now = int(time.time())
    payload = {
        "iat": now - 60,  # Issued at (60 seconds ago for clock skew)
        "exp": now + (10 * 60),  # Expires in 10 minutes
        "iss": str(settings.github_app_id),
    }
    return jwt.encode(payload, settings.github_app_private_key, algorithm="RS256")


async def get_installation_token(installation_id: int) -> str:
    """Get an installation access token (cached)."""
    if installation_id in _token_cache:
        token, expires_at = _token_cache[installation_id]
        if time.time() < expires_at - 60:  # 60 second buffer
            return token

    app_jwt = generate_app_jwt()

    async with httpx.AsyncClient(timeout=settings.github_timeout_seconds) as client:
        response = await client.post(
            f"{settings.github_api_url}/app/installations/{installation_id}/access_tokens",
            headers={
                "Authorization": f"Bearer {app_jwt}",
                "Accept": "application/vnd.github.v3+json",
            },
        )
        response.raise_for_status()
        data = response.json()

    token = data["token"]
    expires_at = time.time() + 3500  # ~58 minutes

    _token_cache[installation_id] = (token, expires_at)
    return token
