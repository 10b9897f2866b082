"""Tests for executing requests and processing responses."""

import asyncio
import io
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from github_client_core.errors import (
    AbuseRateLimitError,
    AcceptedError,
    ErrorResponse,
    RateLimitError,
    RequestCancelledError,
    ResponseDecodeError,
    TransportError,
)
from github_client_core.ratelimit import Rate, RateCategory
from github_client_core.response import ResponseProcessor
from github_client_core.testing import rate_headers


def make_processor(handler, tracker):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ResponseProcessor(http_client, tracker)


class CancellingStream(httpx.AsyncByteStream):
    """Body stream that fires ``cancel`` as soon as it is read."""

    def __init__(self, cancel: asyncio.Event, body: bytes, stall: float = 0):
        self.cancel = cancel
        self.body = body
        self.stall = stall

    async def __aiter__(self):
        self.cancel.set()
        if self.stall:
            await asyncio.sleep(self.stall)
        yield self.body


@pytest.mark.unit
class TestSuccess:
    async def test_decodes_json(self, builder, tracker):
        """Test that a JSON body becomes ``data``."""
        processor = make_processor(lambda request: httpx.Response(200, json={"login": "octocat"}), tracker)

        response = await processor.execute(builder.new_request("GET", "user"))

        assert response.status_code == 200
        assert response.data == {"login": "octocat"}

    async def test_empty_body_is_not_an_error(self, builder, tracker):
        """Test that 204 No Content gives ``data`` None."""
        processor = make_processor(lambda request: httpx.Response(204), tracker)

        response = await processor.execute(builder.new_request("DELETE", "repos/o/r"))

        assert response.data is None

    async def test_invalid_json_raises_decode_error(self, builder, tracker):
        """Test that a 2xx body that is not JSON raises ResponseDecodeError."""
        processor = make_processor(lambda request: httpx.Response(200, text="<html>"), tracker)

        with pytest.raises(ResponseDecodeError) as exc_info:
            await processor.execute(builder.new_request("GET", "user"))

        assert exc_info.value.status_code == 200

    async def test_callable_destination_receives_decoded_json(self, builder, tracker):
        """Test that a callable ``into`` converts the decoded body."""
        processor = make_processor(lambda request: httpx.Response(200, json={"limit": 5, "remaining": 4}), tracker)

        response = await processor.execute(builder.new_request("GET", "x"), Rate.from_dict)

        assert response.data == Rate(limit=5, remaining=4)

    async def test_raw_sink_receives_body_verbatim(self, builder, tracker):
        """Test that a writable ``into`` receives the raw bytes, undecoded."""
        diff = b"diff --git a/README b/README\n+hello\n"
        processor = make_processor(lambda request: httpx.Response(200, content=diff), tracker)
        sink = io.BytesIO()

        response = await processor.execute(builder.new_request("GET", "repos/o/r/pulls/1"), sink)

        assert sink.getvalue() == diff
        assert response.data is None

    async def test_records_rate_and_pagination(self, builder, tracker):
        """Test that the snapshot lands in the request's category only."""
        reset = datetime(2030, 1, 1, tzinfo=UTC)
        headers = rate_headers(limit=30, remaining=12, reset=reset)
        headers["Link"] = '<https://api.github.test/search/code?q=x&page=2>; rel="next"'
        processor = make_processor(lambda request: httpx.Response(200, json={"items": []}, headers=headers), tracker)

        response = await processor.execute(builder.new_request("GET", "search/code?q=x"))

        assert response.pagination.next == 2
        assert response.rate == Rate(limit=30, remaining=12, reset=reset)
        assert tracker.get(RateCategory.SEARCH) == response.rate
        assert tracker.get(RateCategory.CORE) == Rate()

    async def test_out_of_range_rate_reset_does_not_fail_the_call(self, builder, tracker):
        """Test that unusable rate headers never turn a 200 into an error."""
        headers = {"X-RateLimit-Limit": "60", "X-RateLimit-Remaining": "59", "X-RateLimit-Reset": "99999999999999"}
        processor = make_processor(lambda request: httpx.Response(200, json={"ok": True}, headers=headers), tracker)

        response = await processor.execute(builder.new_request("GET", "user"))

        assert response.data == {"ok": True}
        assert response.rate == Rate(limit=60, remaining=59, reset=None)


@pytest.mark.unit
class TestErrors:
    async def test_accepted_with_empty_body(self, builder, tracker):
        """Test that 202 raises AcceptedError even with nothing in the body."""
        processor = make_processor(lambda request: httpx.Response(202), tracker)

        with pytest.raises(AcceptedError) as exc_info:
            await processor.execute(builder.new_request("GET", "repos/o/r/stats/contributors"))

        assert exc_info.value.status_code == 202
        assert exc_info.value.raw == b""

    async def test_server_rate_limit_is_recorded_and_raised(self, builder, tracker):
        """Test that a server-reported rate limit updates the tracker before raising."""
        reset = datetime.now(UTC) + timedelta(minutes=10)
        headers = rate_headers(limit=60, remaining=0, reset=reset)
        body = {"message": "API rate limit exceeded for 203.0.113.7."}
        processor = make_processor(lambda request: httpx.Response(403, json=body, headers=headers), tracker)

        with pytest.raises(RateLimitError) as exc_info:
            await processor.execute(builder.new_request("GET", "user"))

        assert exc_info.value.rate.remaining == 0
        assert exc_info.value.response is not None
        assert tracker.get(RateCategory.CORE).remaining == 0

    async def test_exhausted_quota_short_circuits_without_network(self, builder, tracker):
        """Test that a known-exhausted category is refused locally."""
        calls = 0

        def handler(request):
            nonlocal calls
            calls += 1
            return httpx.Response(200, json={})

        tracker.record(RateCategory.CORE, Rate(limit=60, remaining=0, reset=datetime.now(UTC) + timedelta(hours=1)))
        processor = make_processor(handler, tracker)

        with pytest.raises(RateLimitError) as exc_info:
            await processor.execute(builder.new_request("GET", "user"))

        assert calls == 0
        assert exc_info.value.response is None

        # Search quota is separate
        await processor.execute(builder.new_request("GET", "search/code?q=x"))
        assert calls == 1

    async def test_elapsed_reset_allows_call(self, builder, tracker):
        """Test that an exhausted snapshot whose reset has passed does not block."""
        tracker.record(RateCategory.CORE, Rate(limit=60, remaining=0, reset=datetime.now(UTC) - timedelta(seconds=1)))
        processor = make_processor(lambda request: httpx.Response(200, json={}), tracker)

        response = await processor.execute(builder.new_request("GET", "user"))

        assert response.status_code == 200

    async def test_abuse_detection_carries_retry_after(self, builder, tracker):
        """Test that abuse responses expose Retry-After as a timedelta."""
        body = {
            "message": "You have triggered an abuse detection mechanism.",
            "documentation_url": "https://developer.github.com/v3#abuse-rate-limits",
        }
        processor = make_processor(
            lambda request: httpx.Response(403, json=body, headers={"Retry-After": "30"}),
            tracker,
        )

        with pytest.raises(AbuseRateLimitError) as exc_info:
            await processor.execute(builder.new_request("POST", "repos/o/r/issues", {"title": "t"}))

        assert exc_info.value.retry_after == timedelta(seconds=30)

    async def test_generic_error(self, builder, tracker):
        """Test that other error statuses raise ErrorResponse with the API message."""
        processor = make_processor(lambda request: httpx.Response(404, json={"message": "Not Found"}), tracker)

        with pytest.raises(ErrorResponse) as exc_info:
            await processor.execute(builder.new_request("GET", "repos/o/missing"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Not Found"
        assert "GET https://api.github.test/repos/o/missing: 404 Not Found" in str(exc_info.value)


@pytest.mark.unit
class TestExecuteBool:
    async def test_no_content_is_true(self, builder, tracker):
        """Test that 204 answers yes."""
        processor = make_processor(lambda request: httpx.Response(204), tracker)

        assert await processor.execute_bool(builder.new_request("GET", "user/starred/o/r")) is True

    async def test_not_found_is_false(self, builder, tracker):
        """Test that 404 answers no instead of raising."""
        processor = make_processor(lambda request: httpx.Response(404, json={"message": "Not Found"}), tracker)

        assert await processor.execute_bool(builder.new_request("GET", "user/starred/o/r")) is False

    async def test_other_errors_propagate(self, builder, tracker):
        """Test that a server error is still raised."""
        processor = make_processor(lambda request: httpx.Response(500, json={"message": "boom"}), tracker)

        with pytest.raises(ErrorResponse) as exc_info:
            await processor.execute_bool(builder.new_request("GET", "orgs/o/members/u"))

        assert exc_info.value.status_code == 500

    async def test_rate_limit_is_not_an_answer(self, builder, tracker):
        """Test that a rate limited query raises rather than answering no."""
        headers = rate_headers(limit=60, remaining=0, reset=datetime.now(UTC) + timedelta(minutes=1))
        body = {"message": "API rate limit exceeded for 203.0.113.7."}
        processor = make_processor(lambda request: httpx.Response(403, json=body, headers=headers), tracker)

        with pytest.raises(RateLimitError):
            await processor.execute_bool(builder.new_request("GET", "user/following/octocat"))


@pytest.mark.unit
class TestTransportFailures:
    async def test_transport_error_redacts_client_secret(self, builder, tracker):
        """Test that network errors never leak the OAuth application secret."""

        def handler(request):
            raise httpx.ConnectError(f"connection refused for {request.url}", request=request)

        processor = make_processor(handler, tracker)
        request = builder.new_request("GET", "user?client_id=id&client_secret=s3cret")

        with pytest.raises(TransportError) as exc_info:
            await processor.execute(request)

        assert "s3cret" not in str(exc_info.value)
        assert "s3cret" not in exc_info.value.url
        assert "client_secret=REDACTED" in exc_info.value.url
        assert exc_info.value.__cause__ is None


@pytest.mark.unit
class TestCancellation:
    async def test_cancelled_before_send(self, builder, tracker):
        """Test that an already fired signal prevents the request entirely."""
        calls = 0

        def handler(request):
            nonlocal calls
            calls += 1
            return httpx.Response(200)

        cancel = asyncio.Event()
        cancel.set()
        processor = make_processor(handler, tracker)

        with pytest.raises(RequestCancelledError):
            await processor.execute(builder.new_request("GET", "user"), cancel=cancel)

        assert calls == 0

    async def test_cancellation_during_flight(self, builder, tracker):
        """Test that firing the signal abandons a request still waiting on the server."""
        cancel = asyncio.Event()

        async def handler(request):
            cancel.set()
            await asyncio.sleep(10)
            return httpx.Response(200, json={})

        processor = make_processor(handler, tracker)

        with pytest.raises(RequestCancelledError):
            await asyncio.wait_for(processor.execute(builder.new_request("GET", "user"), cancel=cancel), timeout=5)

    async def test_cancellation_wins_over_transport_error(self, builder, tracker):
        """Test that a signal fired with a network failure reports cancellation."""
        cancel = asyncio.Event()

        async def handler(request):
            cancel.set()
            raise httpx.ReadError("connection reset", request=request)

        processor = make_processor(handler, tracker)

        with pytest.raises(RequestCancelledError):
            await processor.execute(builder.new_request("GET", "user"), cancel=cancel)

    async def test_cancellation_wins_over_error_response(self, builder, tracker):
        """Test that a signal fired while an error body is read beats the classified error."""
        cancel = asyncio.Event()
        stream = CancellingStream(cancel, b'{"message": "Not Found"}')
        processor = make_processor(lambda request: httpx.Response(404, stream=stream), tracker)

        with pytest.raises(RequestCancelledError):
            await processor.execute(builder.new_request("GET", "user"), cancel=cancel)

    async def test_cancellation_wins_over_decode_error(self, builder, tracker):
        """Test that a signal fired while a body is read beats ResponseDecodeError."""
        cancel = asyncio.Event()
        stream = CancellingStream(cancel, b"<html>")
        processor = make_processor(lambda request: httpx.Response(200, stream=stream), tracker)

        with pytest.raises(RequestCancelledError):
            await processor.execute(builder.new_request("GET", "user"), cancel=cancel)

    async def test_cancellation_interrupts_slow_body(self, builder, tracker):
        """Test that a stalled body read is abandoned once the signal fires."""
        cancel = asyncio.Event()
        stream = CancellingStream(cancel, b"{}", stall=10)
        processor = make_processor(lambda request: httpx.Response(200, stream=stream), tracker)

        with pytest.raises(RequestCancelledError):
            await asyncio.wait_for(processor.execute(builder.new_request("GET", "user"), cancel=cancel), timeout=5)

    async def test_unfired_cancel_signal_does_not_interfere(self, builder, tracker):
        """Test that passing a signal that never fires changes nothing."""
        processor = make_processor(lambda request: httpx.Response(200, json=[1]), tracker)

        response = await processor.execute(builder.new_request("GET", "user"), cancel=asyncio.Event())

        assert response.data == [1]


@pytest.mark.unit
async def test_concurrent_calls_update_the_same_category(builder, tracker):
    """Test that concurrent calls leave one of their snapshots, never a mix."""

    async def handler(request):
        remaining = int(request.url.params["n"])
        await asyncio.sleep(0)
        return httpx.Response(200, json={}, headers=rate_headers(limit=100, remaining=remaining))

    processor = make_processor(handler, tracker)

    await asyncio.gather(
        processor.execute(builder.new_request("GET", "user?n=10")),
        processor.execute(builder.new_request("GET", "user?n=20")),
    )

    assert tracker.get(RateCategory.CORE) in {Rate(limit=100, remaining=10), Rate(limit=100, remaining=20)}
