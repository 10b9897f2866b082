"""Error taxonomy and response classification for the GitHub API."""

from github_client_core.errors.exceptions import (
    AbuseRateLimitError,
    AcceptedError,
    APIError,
    ErrorResponse,
    GitHubError,
    InvalidBodyError,
    InvalidOptionsError,
    InvalidURLError,
    RateLimitError,
    RequestBuildError,
    RequestCancelledError,
    ResponseDecodeError,
    TransportError,
    TwoFactorAuthError,
    ValidationError,
)
from github_client_core.errors.handler import check_response, parse_retry_after
from github_client_core.errors.models import Block, ErrorDetail, FieldError

__all__ = [
    "APIError",
    "AbuseRateLimitError",
    "AcceptedError",
    "Block",
    "ErrorDetail",
    "ErrorResponse",
    "FieldError",
    "GitHubError",
    "InvalidBodyError",
    "InvalidOptionsError",
    "InvalidURLError",
    "RateLimitError",
    "RequestBuildError",
    "RequestCancelledError",
    "ResponseDecodeError",
    "TransportError",
    "TwoFactorAuthError",
    "ValidationError",
    "check_response",
    "parse_retry_after",
]
