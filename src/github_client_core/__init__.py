"""GitHub Client Core - shared request/response machinery for GitHub API clients.

This library provides the pieces every resource method funnels through:
- Request building with structured query options and JSON bodies
- Rate limit tracking with pre-emptive refusal of known-exhausted quota
- Pagination from Link headers
- Classification of error responses into typed exceptions
- Authentication transports (basic, token, OAuth application)
- Webhook signature verification and typed event dispatch

Example:
    ```python
    from github_client_core import GitHubClient, ListOptions

    async with GitHubClient.from_env() as gh:
        url = gh.add_options("orgs/python/repos", ListOptions(per_page=50))
        response = await gh.execute(gh.new_request("GET", url))
        print(len(response.data), response.pagination.last, response.rate.remaining)
    ```
"""

__version__ = "0.1.0"

from github_client_core.errors import (  # noqa: E402
    AbuseRateLimitError,
    AcceptedError,
    APIError,
    ErrorResponse,
    GitHubError,
    RateLimitError,
    RequestCancelledError,
    TransportError,
    TwoFactorAuthError,
    ValidationError,
)
from github_client_core.client import GitHubClient  # noqa: E402
from github_client_core.options import ListOptions, RawType, UploadOptions, add_options, query_field  # noqa: E402
from github_client_core.pagination import Pagination, parse_link_header  # noqa: E402
from github_client_core.ratelimit import Rate, RateCategory, RateLimits, RateLimitTracker  # noqa: E402
from github_client_core.request import EndpointRequest, RequestBuilder  # noqa: E402
from github_client_core.response import APIResponse, ResponseProcessor  # noqa: E402

__all__ = [
    "APIError",
    "APIResponse",
    "AbuseRateLimitError",
    "AcceptedError",
    "EndpointRequest",
    "ErrorResponse",
    "GitHubClient",
    "GitHubError",
    "ListOptions",
    "Pagination",
    "Rate",
    "RateCategory",
    "RateLimitError",
    "RateLimitTracker",
    "RateLimits",
    "RawType",
    "RequestBuilder",
    "RequestCancelledError",
    "ResponseProcessor",
    "TransportError",
    "TwoFactorAuthError",
    "UploadOptions",
    "ValidationError",
    "__version__",
    "add_options",
    "parse_link_header",
    "query_field",
]
