"""Structured exceptions for request building, transport and API errors."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from github_client_core.errors.models import ErrorDetail
    from github_client_core.ratelimit import Rate


class GitHubError(Exception):
    """Base exception for everything raised by github-client-core."""

    pass


class RequestBuildError(GitHubError, ValueError):
    """A request could not be constructed."""

    pass


class InvalidURLError(RequestBuildError):
    """The relative path or base URL could not be parsed."""

    pass


class InvalidBodyError(RequestBuildError):
    """The request body could not be serialized to JSON."""

    pass


class InvalidOptionsError(RequestBuildError):
    """The query options value could not be encoded."""

    pass


class TransportError(GitHubError):
    """Network level failure (DNS, connection, TLS, redirect loop).

    The URL and message have any ``client_secret`` redacted.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class RequestCancelledError(GitHubError):
    """The caller's cancellation signal fired before the call completed."""

    pass


def _describe(response: "httpx.Response | None") -> str:
    """Render ``METHOD url: status`` for a response, with secrets redacted."""
    if response is None:
        return ""
    from github_client_core.request import sanitize_url

    try:
        request = response.request
    except RuntimeError:
        return f"{response.status_code}"
    return f"{request.method} {sanitize_url(request.url)}: {response.status_code}"


class APIError(GitHubError):
    """Base exception for errors derived from an API response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    def __str__(self) -> str:
        prefix = _describe(self.response)
        return f"{prefix} {self.message}" if prefix else self.message


class AcceptedError(APIError):
    """202 Accepted: the server queued a background job, try again later.

    Not a failure as such; ``raw`` holds whatever body came with the response.
    """

    def __init__(self, raw: bytes = b"", **kwargs):
        kwargs.setdefault("status_code", 202)
        super().__init__("job scheduled on GitHub side; try again later", **kwargs)
        self.raw = raw


class RateLimitError(APIError):
    """Primary rate limit exhausted, observed from the server or pre-empted locally.

    When pre-empted no request was sent and ``response`` is None.
    """

    def __init__(self, message: str, rate: "Rate", **kwargs):
        kwargs.setdefault("status_code", 403)
        super().__init__(message, **kwargs)
        self.rate = rate

    def __str__(self) -> str:
        text = super().__str__()
        if self.rate.reset is not None:
            remaining = self.rate.reset - datetime.now(UTC)
            text += f"; rate reset in {remaining}"
        return text


class AbuseRateLimitError(APIError):
    """403 from the secondary (abuse detection) rate limiter."""

    def __init__(self, message: str, retry_after: timedelta | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ResponseDecodeError(APIError):
    """A successful response carried a body that is not valid JSON."""

    pass


class ErrorResponse(APIError):
    """Generic error response carrying the decoded error body."""

    def __init__(self, message: str, detail: "ErrorDetail | None" = None, **kwargs):
        super().__init__(message, **kwargs)
        self.detail = detail

    @property
    def errors(self) -> list:
        return self.detail.errors if self.detail else []

    @property
    def documentation_url(self) -> str | None:
        return self.detail.documentation_url if self.detail else None

    def __str__(self) -> str:
        return f"{super().__str__()} {[str(e) for e in self.errors]}"


class TwoFactorAuthError(ErrorResponse):
    """401 with an ``X-GitHub-OTP: required`` challenge."""

    pass


class ValidationError(ErrorResponse):
    """4xx whose body lists per-field validation errors."""

    pass
