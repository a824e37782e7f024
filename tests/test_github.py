"""Tests for GitHub error mapping and token handling."""

import time

import httpx
import jwt
import pytest

from reviewgate.config import settings
from reviewgate.errors import UpstreamError
from reviewgate.services.github_client import GitHubClient, _upstream_error
from reviewgate.utils import github_auth
from reviewgate.utils.tokens import InvalidTokenError, create_access_token, decode_access_token

MERGE_URL = "https://api.github.com/repos/acme/widgets/pulls/42/merge"


def _status_error(status_code: int, **kwargs) -> httpx.HTTPStatusError:
    request = httpx.Request("PUT", MERGE_URL)
    response = httpx.Response(status_code, request=request, **kwargs)
    return httpx.HTTPStatusError("failed", request=request, response=response)


def test_status_and_message_pass_through():
    error = _upstream_error(
        _status_error(405, json={"message": "Pull Request is not mergeable"}),
        "Error merging pull request",
    )

    assert error.status_code == 405
    assert error.to_dict() == {"message": "Pull Request is not mergeable"}


def test_non_json_body_uses_text():
    error = _upstream_error(_status_error(502, text="Bad gateway"), "Error merging pull request")

    assert error.status_code == 502
    assert error.message == "Bad gateway"


def test_timeout_maps_to_gateway_timeout():
    request = httpx.Request("GET", MERGE_URL)
    error = _upstream_error(httpx.ReadTimeout("timed out", request=request), "Error fetching")

    assert error.status_code == 504


def test_connection_failure_maps_to_bad_gateway():
    request = httpx.Request("GET", MERGE_URL)
    error = _upstream_error(httpx.ConnectError("refused", request=request), "Error fetching")

    assert error.status_code == 502
    assert error.message.startswith("Error fetching")


async def test_merge_failure_reports_not_merged():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/acme/widgets/pulls/42/merge"
        return httpx.Response(405, json={"message": "Pull Request is not mergeable"})

    gh = GitHubClient()
    gh._client = httpx.AsyncClient(
        base_url=settings.github_api_url, transport=httpx.MockTransport(handler)
    )

    with pytest.raises(UpstreamError) as exc_info:
        await gh.merge_pull_request("acme", "widgets", 42, merge_method="squash")
    await gh._client.aclose()

    assert exc_info.value.status_code == 405
    assert exc_info.value.to_dict() == {
        "message": "Pull Request is not mergeable",
        "merged": False,
    }


def test_app_jwt_requires_credentials(monkeypatch):
    monkeypatch.setattr(settings, "github_app_id", None)

    with pytest.raises(RuntimeError):
        github_auth.generate_app_jwt()


async def test_installation_token_is_cached(monkeypatch):
    monkeypatch.setitem(github_auth._token_cache, 77, ("cached-token", time.time() + 3600))

    assert await github_auth.get_installation_token(77) == "cached-token"


def test_access_token_round_trip():
    assert decode_access_token(create_access_token(42)) == 42


def test_missing_token():
    with pytest.raises(InvalidTokenError, match="Token not provided"):
        decode_access_token(None)


def test_wrong_secret():
    token = jwt.encode({"sub": "1"}, "another-secret-entirely-0123456789abcdef", algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_expired_token():
    token = create_access_token(1, expires_in_seconds=-10)

    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_without_subject():
    token = jwt.encode({"role": "admin"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    with pytest.raises(InvalidTokenError, match="no valid subject"):
        decode_access_token(token)
