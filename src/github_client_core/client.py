"""Client facade tying request building, execution and rate tracking together.

Resource methods live outside this package; they only need ``new_request``
(or ``new_upload_request``), ``add_options`` and ``execute``:

```python
async with GitHubClient.from_env() as gh:
    url = gh.add_options("users/octocat/repos", ListOptions(per_page=100))
    response = await gh.execute(gh.new_request("GET", url))
    while response.pagination.next:
        ...

    starred = await gh.execute_bool(gh.new_request("GET", "user/starred/octocat/Hello-World"))
```
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from github_client_core.auth.credentials import CredentialResolver, build_auth_transport, resolve_github_config
from github_client_core.options import add_options
from github_client_core.ratelimit import RateCategory, RateLimits, RateLimitTracker
from github_client_core.request import (
    DEFAULT_BASE_URL,
    UPLOAD_BASE_URL,
    USER_AGENT,
    EndpointRequest,
    RequestBuilder,
)
from github_client_core.response import APIResponse, ResponseProcessor
from github_client_core.webhooks.envelope import WebhookEnvelope
from github_client_core.webhooks.events import Event
from github_client_core.webhooks.exceptions import WebhookError

logger = logging.getLogger(__name__)

# Redirect chains longer than this surface as TransportError
MAX_REDIRECTS = 10


class GitHubClient:
    """Async client core for the GitHub REST API.

    Args:
        http_client: Preconfigured httpx client. When omitted one is created
            (with ``transport`` if given) and closed by ``aclose``. Created
            clients follow redirects, so renamed repositories resolve.
        transport: Transport for the created httpx client, typically an
            authentication transport or ``httpx.MockTransport`` in tests.
        base_url: API root, must end with ``/``.
        upload_url: Upload root, must end with ``/``.
        user_agent: User-Agent header; empty string omits it.
        tracker: Rate limit tracker; each client gets its own by default.
        timeout: Timeout in seconds for the created httpx client.
        webhook_secret: Secret used by ``parse_webhook``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        base_url: str = DEFAULT_BASE_URL,
        upload_url: str = UPLOAD_BASE_URL,
        user_agent: str = USER_AGENT,
        tracker: RateLimitTracker | None = None,
        timeout: float = 30.0,
        webhook_secret: str | bytes | None = None,
    ) -> None:
        self._owns_http_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                transport=transport,
                timeout=timeout,
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
            )
        self.http_client = http_client
        self.builder = RequestBuilder(base_url=base_url, upload_url=upload_url, user_agent=user_agent)
        self.tracker = tracker or RateLimitTracker()
        self.processor = ResponseProcessor(self.http_client, self.tracker)
        self.webhook_secret = webhook_secret

    @classmethod
    def from_env(
        cls,
        resolver: CredentialResolver | None = None,
        *,
        wrapped_transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> "GitHubClient":
        """Create a client from ``GITHUB_*`` environment configuration.

        Credentials select the authentication transport; ``GITHUB_BASE_URL``
        and ``GITHUB_UPLOAD_URL`` point the client at GitHub Enterprise and
        ``GITHUB_WEBHOOK_SECRET`` becomes the ``parse_webhook`` secret.
        Remaining keyword arguments are passed to the constructor.
        """
        config = resolve_github_config(resolver)
        kwargs.setdefault("transport", build_auth_transport(config, wrapped_transport=wrapped_transport))
        if config.base_url:
            kwargs.setdefault("base_url", config.base_url)
        if config.upload_url:
            kwargs.setdefault("upload_url", config.upload_url)
        if config.webhook_secret:
            kwargs.setdefault("webhook_secret", config.webhook_secret)
        return cls(**kwargs)

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    def new_request(self, method: str, path: str, body: Any = None, *, accept: str | None = None) -> EndpointRequest:
        return self.builder.new_request(method, path, body, accept=accept)

    def new_upload_request(self, path: str, content: bytes, media_type: str | None = None) -> EndpointRequest:
        return self.builder.new_upload_request(path, content, media_type)

    @staticmethod
    def add_options(path: str, options: Any) -> str:
        return add_options(path, options)

    async def execute(
        self,
        request: EndpointRequest,
        into: Any = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> APIResponse:
        """Send a request; see ``ResponseProcessor.execute``."""
        return await self.processor.execute(request, into, cancel=cancel)

    async def execute_bool(self, request: EndpointRequest, *, cancel: asyncio.Event | None = None) -> bool:
        """Send a yes/no query; see ``ResponseProcessor.execute_bool``."""
        return await self.processor.execute_bool(request, cancel=cancel)

    async def rate_limits(self, *, cancel: asyncio.Event | None = None) -> tuple[RateLimits, APIResponse]:
        """Fetch the current quota of every category.

        Querying the rate limit does not count against it. The returned
        snapshots also refresh the tracker.
        """
        response = await self.execute(self.new_request("GET", "rate_limit"), RateLimits.from_dict, cancel=cancel)
        limits: RateLimits = response.data or RateLimits()
        if limits.core is not None:
            self.tracker.record(RateCategory.CORE, limits.core)
        if limits.search is not None:
            self.tracker.record(RateCategory.SEARCH, limits.search)
        return limits, response

    def parse_webhook(self, headers: Mapping[str, str], body: bytes) -> Event:
        """Verify an inbound delivery with the configured secret and decode it.

        Raises:
            WebhookError: No webhook secret is configured, or the delivery
                fails verification or decoding.
        """
        if not self.webhook_secret:
            raise WebhookError("no webhook secret configured (set GITHUB_WEBHOOK_SECRET)")
        return WebhookEnvelope.from_headers(headers, body).parse(self.webhook_secret)
