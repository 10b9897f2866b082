"""Testing utilities for code built on github-client-core.

Helpers for building clients on top of ``httpx.MockTransport`` and for
producing the headers the API attaches to responses.

Example:
    ```python
    from github_client_core.testing import create_mock_client, rate_headers


    async def test_lists_repos():
        def handler(request):
            return httpx.Response(200, json=[], headers=rate_headers(remaining=59))

        async with create_mock_client(handler) as gh:
            response = await gh.execute(gh.new_request("GET", "user/repos"))
            assert response.rate.remaining == 59
    ```
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import httpx

from github_client_core.client import GitHubClient
from github_client_core.webhooks.signature import compute_signature

TEST_BASE_URL = "https://api.github.test/"
TEST_UPLOAD_URL = "https://uploads.github.test/"


def create_mock_client(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> GitHubClient:
    """GitHubClient whose requests are answered by ``handler``.

    ``handler`` may be sync or async, as accepted by ``httpx.MockTransport``.
    """
    kwargs.setdefault("base_url", TEST_BASE_URL)
    kwargs.setdefault("upload_url", TEST_UPLOAD_URL)
    return GitHubClient(transport=httpx.MockTransport(handler), **kwargs)


def rate_headers(limit: int = 60, remaining: int = 59, reset: datetime | int | None = None) -> dict[str, str]:
    """``X-RateLimit-*`` headers; ``reset`` as datetime or Unix seconds."""
    headers = {
        "X-RateLimit-Limit": str(limit),
        "X-RateLimit-Remaining": str(remaining),
    }
    if reset is not None:
        seconds = int(reset.timestamp()) if isinstance(reset, datetime) else int(reset)
        headers["X-RateLimit-Reset"] = str(seconds)
    return headers


def link_header(base_url: str, **pages: int) -> str:
    """Link header value, e.g. ``link_header(url, next=2, last=5)``."""
    separator = "&" if "?" in base_url else "?"
    return ", ".join(f'<{base_url}{separator}page={page}>; rel="{rel}"' for rel, page in pages.items())


def webhook_headers(event_type: str, payload: bytes, secret: str | bytes, algorithm: str = "sha1") -> dict[str, str]:
    """Headers of a correctly signed JSON webhook delivery."""
    return {
        "Content-Type": "application/json",
        "X-GitHub-Event": event_type,
        "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
        "X-Hub-Signature": compute_signature(payload, secret, algorithm),
    }


__all__ = [
    "TEST_BASE_URL",
    "TEST_UPLOAD_URL",
    "create_mock_client",
    "link_header",
    "rate_headers",
    "webhook_headers",
]
