"""Executing requests and turning responses into results or typed errors.

``ResponseProcessor.execute`` performs exactly one logical call (redirects are
followed by the httpx client). It never retries: waiting out a rate limit or
abuse back-off is left to the caller, who gets everything needed to decide
from the raised error.

Example:
    ```python
    processor = ResponseProcessor(httpx.AsyncClient(), RateLimitTracker())
    response = await processor.execute(builder.new_request("GET", "user/repos"))
    print(response.data, response.pagination.next, response.rate.remaining)

    # Raw formats stream into anything with a write() method
    buffer = io.BytesIO()
    await processor.execute(request.with_header("Accept", RawType.DIFF.media_type), buffer)
    ```
"""

import asyncio
import contextlib
import json
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx

from github_client_core.errors.exceptions import (
    ErrorResponse,
    RequestCancelledError,
    ResponseDecodeError,
    TransportError,
)
from github_client_core.errors.handler import check_response
from github_client_core.pagination import Pagination
from github_client_core.ratelimit import Rate, RateLimitTracker, category_for_path, parse_rate
from github_client_core.request import REDACTED, EndpointRequest, sanitize_url

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Unread body bytes discarded before closing, so the connection can be reused
DRAIN_LIMIT = 512


@dataclass
class APIResponse:
    """Result of a successful call."""

    http_response: httpx.Response
    pagination: Pagination
    rate: Rate
    data: Any = None

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.http_response.headers


def _redact(text: str, request: EndpointRequest) -> str:
    secret = request.url.params.get("client_secret")
    if secret:
        text = text.replace(secret, REDACTED)
    return text


async def _drain_and_close(response: httpx.Response) -> None:
    try:
        if not response.is_stream_consumed:
            drained = 0
            async for chunk in response.aiter_raw():
                drained += len(chunk)
                if drained >= DRAIN_LIMIT:
                    break
    except httpx.HTTPError as e:
        logger.debug(f"Discarding unread response body failed: {e}")
    finally:
        await response.aclose()


class ResponseProcessor:
    """Sends requests through an httpx client and classifies the results.

    Args:
        http_client: Client used for sending; its transport stack (auth
            decorators, mocks) applies to every call.
        tracker: Rate limit state consulted before and updated after calls.
    """

    def __init__(self, http_client: httpx.AsyncClient, tracker: RateLimitTracker) -> None:
        self.http_client = http_client
        self.tracker = tracker

    async def execute(
        self,
        request: EndpointRequest,
        into: Any = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> APIResponse:
        """Send ``request`` and decode the response.

        Args:
            request: The request to send.
            into: Destination for the body. An object with a ``write`` method
                receives the raw bytes verbatim; a callable receives the
                decoded JSON and its return value becomes ``data``; None keeps
                the decoded JSON as ``data``.
            cancel: Per-call cancellation signal. Once set, the call raises
                RequestCancelledError instead of any other outcome, including
                an error response whose body was still being read.

        Returns:
            APIResponse with pagination, rate snapshot and decoded data.

        Raises:
            RateLimitError: Quota known to be exhausted (no request sent) or
                reported by the server.
            RequestCancelledError: ``cancel`` fired.
            TransportError: Network failure or redirect loop, with secrets
                redacted.
            APIError: Any other classified error response.
        """
        category = category_for_path(request.path)

        rate_limit_error = self.tracker.check_before_call(category)
        if rate_limit_error is not None:
            logger.warning(f"{request.method} {sanitize_url(request.url)} not sent: {rate_limit_error.message}")
            raise rate_limit_error

        if cancel is not None and cancel.is_set():
            raise RequestCancelledError(f"{request.method} {sanitize_url(request.url)} cancelled before sending")

        response = await self._send(request, cancel)
        try:
            rate = parse_rate(response.headers)
            self.tracker.record(category, rate)
            pagination = Pagination.from_headers(response.headers)

            data = await self._until_cancelled(request, self._consume(response, into), cancel)

            return APIResponse(http_response=response, pagination=pagination, rate=rate, data=data)
        finally:
            await _drain_and_close(response)

    async def execute_bool(self, request: EndpointRequest, *, cancel: asyncio.Event | None = None) -> bool:
        """Send a yes/no query such as "is this repository starred".

        These endpoints answer 204 for yes and 404 for no.

        Returns:
            True on success, False on a 404 error response.

        Raises:
            Whatever ``execute`` raises, except the 404 ErrorResponse.
        """
        try:
            await self.execute(request, cancel=cancel)
        except ErrorResponse as e:
            if e.status_code == 404:
                return False
            raise
        return True

    async def _consume(self, response: httpx.Response, into: Any) -> Any:
        if not response.is_success or response.status_code == 202:
            await response.aread()
            check_response(response)
        return await self._read_body(response, into)

    async def _send(self, request: EndpointRequest, cancel: asyncio.Event | None) -> httpx.Response:
        logger.debug(f"Sending {request.method} {sanitize_url(request.url)}")
        try:
            return await self._until_cancelled(
                request, self.http_client.send(request.to_httpx(), stream=True), cancel
            )
        except (httpx.TransportError, httpx.TooManyRedirects) as e:
            if cancel is not None and cancel.is_set():
                raise RequestCancelledError(f"{request.method} {sanitize_url(request.url)} cancelled") from e
            url = str(sanitize_url(request.url))
            raise TransportError(f"{request.method} {url}: {_redact(str(e), request)}", url=url) from None

    async def _until_cancelled(
        self,
        request: EndpointRequest,
        step: Coroutine[Any, Any, T],
        cancel: asyncio.Event | None,
    ) -> T:
        """Run ``step`` unless ``cancel`` fires first or while it runs."""
        if cancel is None:
            return await step

        task = asyncio.ensure_future(step)
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if cancel.is_set():
            await self._abandon(task)
            raise RequestCancelledError(f"{request.method} {sanitize_url(request.url)} cancelled")
        return task.result()

    @staticmethod
    async def _abandon(task: "asyncio.Future[Any]") -> None:
        """Cancel a step overtaken by cancellation and discard its outcome."""
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            result = await task
            if isinstance(result, httpx.Response):
                await result.aclose()

    async def _read_body(self, response: httpx.Response, into: Any) -> Any:
        if into is not None and callable(getattr(into, "write", None)):
            async for chunk in response.aiter_bytes():
                into.write(chunk)
            return None

        content = await response.aread()
        if not content.strip():
            # 204/205 and many PUT/DELETE endpoints return nothing
            return None
        try:
            data = json.loads(content)
        except ValueError as e:
            raise ResponseDecodeError(
                f"Invalid JSON in response body: {e}",
                status_code=response.status_code,
                response=response,
            ) from e

        if callable(into):
            return into(data)
        return data
