"""Transport layer components for composable HTTP middleware.

Transports wrap httpx's AsyncHTTPTransport and decorate outbound requests
with credentials before they reach the network. They can be stacked:

Example:
    ```python
    from github_client_core.transport import BasicAuthTransport

    transport = BasicAuthTransport(username="octocat", password="secret")
    client = GitHubClient(transport=transport)
    ```
"""

from github_client_core.transport.auth import (
    BasicAuthTransport,
    TokenAuthTransport,
    UnauthenticatedRateLimitedTransport,
    clone_request,
)

__all__ = [
    "BasicAuthTransport",
    "TokenAuthTransport",
    "UnauthenticatedRateLimitedTransport",
    "clone_request",
]
