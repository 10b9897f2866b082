"""Error classification for HTTP responses."""

from datetime import timedelta

import httpx

from github_client_core.errors.exceptions import (
    AbuseRateLimitError,
    AcceptedError,
    ErrorResponse,
    RateLimitError,
    TwoFactorAuthError,
    ValidationError,
)
from github_client_core.errors.models import ErrorDetail
from github_client_core.ratelimit import HEADER_RATE_REMAINING, parse_rate

HEADER_OTP = "X-GitHub-OTP"

RATE_LIMIT_MESSAGE_PREFIX = "API rate limit exceeded for "
ABUSE_DOCUMENTATION_URL = "https://developer.github.com/v3#abuse-rate-limits"


def check_response(response: httpx.Response) -> None:
    """Raise the single matching typed error for a non-2xx (or 202) response.

    The predicates are evaluated in a fixed order so that the most specific
    one wins for responses that satisfy several of them (any 403 for example):

    1. 202 -> AcceptedError
    2. other 2xx -> no error
    3. 401 with an OTP challenge -> TwoFactorAuthError
    4. 403, zero remaining quota and rate-limit message -> RateLimitError
    5. 403 with the abuse documentation URL -> AbuseRateLimitError
    6. 4xx listing field errors -> ValidationError
    7. anything else -> ErrorResponse

    Args:
        response: HTTP response object whose content has been read

    Raises:
        APIError subclass describing the failure
    """
    status_code = response.status_code

    if status_code == 202:
        raise AcceptedError(raw=response.content, response=response)
    if 200 <= status_code <= 299:
        return

    detail = ErrorDetail.from_response(response)
    message = detail.message or f"HTTP {status_code}"

    if status_code == 401 and response.headers.get(HEADER_OTP, "").startswith("required"):
        raise TwoFactorAuthError(message, detail=detail, status_code=status_code, response=response)

    if (
        status_code == 403
        and response.headers.get(HEADER_RATE_REMAINING) == "0"
        and detail.message.startswith(RATE_LIMIT_MESSAGE_PREFIX)
    ):
        raise RateLimitError(message, rate=parse_rate(response.headers), status_code=status_code, response=response)

    if status_code == 403 and detail.documentation_url == ABUSE_DOCUMENTATION_URL:
        raise AbuseRateLimitError(
            message,
            retry_after=parse_retry_after(response),
            status_code=status_code,
            response=response,
        )

    if 400 <= status_code < 500 and detail.errors:
        raise ValidationError(message, detail=detail, status_code=status_code, response=response)

    raise ErrorResponse(message, detail=detail, status_code=status_code, response=response)


def parse_retry_after(response: httpx.Response) -> timedelta | None:
    """Parse a whole-seconds ``Retry-After`` header.

    Args:
        response: HTTP response with optional Retry-After header

    Returns:
        The delay, or None if the header is missing or not an integer
    """
    retry_after = response.headers.get("Retry-After")
    if retry_after is None:
        return None
    try:
        seconds = int(retry_after.strip())
    except ValueError:
        return None
    if seconds < 0:
        return None
    return timedelta(seconds=seconds)
