"""Authentication transports that decorate outbound requests.

Each transport copies the request it receives, decorates the copy, and hands
it to the wrapped transport. The caller's request is never modified.

## BasicAuthTransport Example

```python
from github_client_core.transport.auth import BasicAuthTransport
import httpx

transport = BasicAuthTransport(username="octocat", password="secret", otp="123456")

async with httpx.AsyncClient(transport=transport) as client:
    response = await client.get("https://api.github.com/user")
```

## UnauthenticatedRateLimitedTransport Example

```python
# Unauthenticated calls counted against an OAuth application's higher quota
transport = UnauthenticatedRateLimitedTransport(
    client_id="app-client-id",
    client_secret="app-client-secret",
)
```
"""

import base64
import logging
from abc import ABC, abstractmethod

import httpx

from github_client_core.auth.exceptions import CredentialError

logger = logging.getLogger(__name__)

HEADER_OTP = "X-GitHub-OTP"


def clone_request(request: httpx.Request, url: httpx.URL | None = None) -> httpx.Request:
    """Copy a request with its own headers, sharing the body stream."""
    return httpx.Request(
        request.method,
        url if url is not None else request.url,
        headers=request.headers.copy(),
        stream=request.stream,
        extensions=dict(request.extensions),
    )


class _DecoratingTransport(httpx.AsyncBaseTransport, ABC):
    """Shared plumbing: wrapped transport lifecycle and request hand-off."""

    def __init__(self, *, wrapped_transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._wrapped_transport = wrapped_transport or httpx.AsyncHTTPTransport()

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    @abstractmethod
    def decorate(self, request: httpx.Request) -> httpx.Request:
        """Return a decorated copy of ``request``."""

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._wrapped_transport.handle_async_request(self.decorate(request))


class BasicAuthTransport(_DecoratingTransport):
    """Authenticate with username and password, plus an optional one-time password.

    Args:
        username: Account login.
        password: Account password.
        otp: One-time password for accounts with two-factor auth enabled.
        wrapped_transport: Transport to delegate to (default: httpx.AsyncHTTPTransport).
    """

    def __init__(
        self,
        *,
        username: str,
        password: str,
        otp: str | None = None,
        wrapped_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(wrapped_transport=wrapped_transport)
        self.username = username
        self.password = password
        self.otp = otp

    def decorate(self, request: httpx.Request) -> httpx.Request:
        request = clone_request(request)
        credentials = base64.b64encode(f"{self.username}:{self.password}".encode()).decode("ascii")
        request.headers["Authorization"] = f"Basic {credentials}"
        if self.otp:
            request.headers[HEADER_OTP] = self.otp
        return request


class TokenAuthTransport(_DecoratingTransport):
    """Authenticate with an OAuth or personal access token."""

    def __init__(self, *, token: str, wrapped_transport: httpx.AsyncBaseTransport | None = None) -> None:
        if not token:
            raise CredentialError("token is empty")
        super().__init__(wrapped_transport=wrapped_transport)
        self.token = token

    def decorate(self, request: httpx.Request) -> httpx.Request:
        request = clone_request(request)
        request.headers["Authorization"] = f"token {self.token}"
        return request


class UnauthenticatedRateLimitedTransport(_DecoratingTransport):
    """Add OAuth application credentials as query parameters.

    Unauthenticated requests made this way count against the application's
    higher rate limit. The secret travels in the URL, which is why errors
    redact ``client_secret`` before showing URLs.

    Raises:
        CredentialError: If ``client_id`` or ``client_secret`` is empty.
    """

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        wrapped_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not client_id:
            raise CredentialError("client_id is empty")
        if not client_secret:
            raise CredentialError("client_secret is empty")
        super().__init__(wrapped_transport=wrapped_transport)
        self.client_id = client_id
        self.client_secret = client_secret

    def decorate(self, request: httpx.Request) -> httpx.Request:
        url = request.url.copy_set_param("client_id", self.client_id).copy_set_param(
            "client_secret", self.client_secret
        )
        return clone_request(request, url=url)
