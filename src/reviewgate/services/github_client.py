"""Async GitHub API client for pull request lookups and merges."""

import logging
from typing import Any

import httpx

from ..config import settings
from ..errors import UpstreamError
from ..utils.github_auth import get_installation_token

logger = logging.getLogger(__name__)


def _upstream_error(exc: httpx.HTTPError, fallback: str, **extra: Any) -> UpstreamError:
    """Translate an httpx failure into an UpstreamError, keeping GitHub's status and message."""
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        try:
            message = response.json().get("message") or fallback
        except ValueError:
            message = response.text or fallback
        return UpstreamError(response.status_code, message, **extra)
    if isinstance(exc, httpx.TimeoutException):
        return UpstreamError(504, f"{fallback}: GitHub did not respond in time", **extra)
    return UpstreamError(502, f"{fallback}: {exc}", **extra)


class GitHubClient:
    """Async GitHub API client.

    Authenticates with an App installation token when ``installation_id`` is
    given, otherwise with the configured ``github_token``.
    """

    def __init__(self, installation_id: int | None = None):
        self.installation_id = installation_id
        self._token: str | None = None
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GitHubClient":
        if self.installation_id is not None:
            try:
                self._token = await get_installation_token(self.installation_id)
            except httpx.HTTPError as e:
                raise _upstream_error(e, "Error authenticating with GitHub") from e
        else:
            self._token = settings.github_token

        headers = {
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        self._client = httpx.AsyncClient(
            base_url=settings.github_api_url,
            headers=headers,
            timeout=settings.github_timeout_seconds,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    async def get_pull_request(
        self,
        owner: str,
        repo: str,
        pr_number: int,
    ) -> dict[str, Any]:
        """Get PR details."""
        assert self._client is not None
        try:
            response = await self._client.get(f"/repos/{owner}/{repo}/pulls/{pr_number}")
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Fetching {owner}/{repo}#{pr_number} failed: {e}")
            raise _upstream_error(e, "Error fetching pull request data") from e
        return response.json()

    async def merge_pull_request(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        merge_method: str = "merge",  # merge, squash, rebase
        commit_title: str | None = None,
        commit_message: str | None = None,
    ) -> dict[str, Any]:
        """
        Merge a PR.

        Returns GitHub's merge response: {"sha": "...", "merged": true, "message": "..."}
        """
        assert self._client is not None
        payload: dict[str, Any] = {"merge_method": merge_method}
        if commit_title:
            payload["commit_title"] = commit_title
        if commit_message:
            payload["commit_message"] = commit_message

        try:
            response = await self._client.put(
                f"/repos/{owner}/{repo}/pulls/{pr_number}/merge",
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Merging {owner}/{repo}#{pr_number} failed: {e}")
            raise _upstream_error(e, "Error merging pull request", merged=False) from e
        return response.json()
