"""Tests for the BLT API client: headers, bodies and failure classification."""

import asyncio

import httpx
import pytest

from blt_mcp.client import BLTClient
from blt_mcp.config import ServerConfig
from blt_mcp.errors import (
    HttpError,
    NetworkError,
    ProtocolError,
    RequestTimeoutError,
)
from tests.conftest import API_BASE, API_KEY, StubAPI


class TestRequestShape:
    """Outbound requests carry the expected headers and bodies."""

    @pytest.mark.asyncio
    async def test_get_sends_json_and_bearer_headers(self, client: BLTClient, api: StubAPI) -> None:
        """GET requests are authenticated and JSON-typed."""
        await client.request("/issues")

        call = api.calls[0]
        assert call.method == "GET"
        assert call.path == "/issues"
        assert call.headers["content-type"] == "application/json"
        assert call.headers["accept"] == "application/json"
        assert call.headers["authorization"] == f"Bearer {API_KEY}"

    @pytest.mark.asyncio
    async def test_get_never_sends_body(self, client: BLTClient, api: StubAPI) -> None:
        """A body passed to GET is dropped."""
        await client.request("/issues", "GET", {"ignored": True})
        assert api.calls[0].body is None

    @pytest.mark.asyncio
    async def test_post_and_patch_send_json_body(self, client: BLTClient, api: StubAPI) -> None:
        """Non-GET methods serialize the body as JSON."""
        await client.request("/issues", "POST", {"title": "t"})
        await client.request("/issues/1", "patch", {"status": "closed"})

        assert (api.calls[0].method, api.calls[0].body) == ("POST", {"title": "t"})
        assert (api.calls[1].method, api.calls[1].body) == ("PATCH", {"status": "closed"})

    @pytest.mark.asyncio
    async def test_no_authorization_without_key(self, api: StubAPI) -> None:
        """An empty key means unauthenticated requests."""
        config = ServerConfig(api_base=API_BASE, api_key="")
        async with BLTClient(config, transport=httpx.MockTransport(api.handler)) as client:
            await client.request("/rewards")

        assert "authorization" not in api.calls[0].headers

    @pytest.mark.asyncio
    async def test_unsupported_method(self, client: BLTClient, api: StubAPI) -> None:
        with pytest.raises(ValueError, match="Unsupported HTTP method"):
            await client.request("/issues/1", "DELETE")
        assert api.calls == []


class TestResponses:
    @pytest.mark.asyncio
    async def test_returns_object(self, client: BLTClient, api: StubAPI) -> None:
        api.respond("GET", "/issues/9", json={"id": 9, "title": "XSS"})
        assert await client.request("/issues/9") == {"id": 9, "title": "XSS"}

    @pytest.mark.asyncio
    async def test_returns_array_for_collections(self, client: BLTClient, api: StubAPI) -> None:
        api.respond("GET", "/issues", json=[{"id": 1}, {"id": 2}])
        assert await client.request("/issues") == [{"id": 1}, {"id": 2}]

    @pytest.mark.asyncio
    async def test_http_error_carries_status_and_reason(
        self, client: BLTClient, api: StubAPI
    ) -> None:
        """Non-success responses raise HttpError with code and reason."""
        api.respond("GET", "/issues/404", status=404, json={"detail": "nope"})

        with pytest.raises(HttpError) as exc_info:
            await client.request("/issues/404")

        assert exc_info.value.status_code == 404
        assert exc_info.value.reason == "Not Found"
        assert "404 Not Found" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_invalid_json_is_protocol_error(self, client: BLTClient, api: StubAPI) -> None:
        api.respond("GET", "/issues", content=b"<html>oops</html>")
        with pytest.raises(ProtocolError, match="not valid JSON"):
            await client.request("/issues")


class TestFailureClassification:
    """Every failure maps to exactly one error kind."""

    @pytest.mark.asyncio
    async def test_slow_response_is_timeout(self, client: BLTClient, api: StubAPI) -> None:
        """A call that never answers within the bound is aborted as a timeout."""

        async def never_answers(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        api.respond_with("GET", "/issues", never_answers)

        with pytest.raises(RequestTimeoutError) as exc_info:
            await client.request("/issues")

        assert not isinstance(exc_info.value, NetworkError)
        assert exc_info.value.timeout_seconds == 0.2

    @pytest.mark.asyncio
    async def test_httpx_timeout_is_timeout(self, client: BLTClient, api: StubAPI) -> None:
        def read_timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        api.respond_with("GET", "/issues", read_timeout)

        with pytest.raises(RequestTimeoutError):
            await client.request("/issues")

    @pytest.mark.asyncio
    async def test_connection_refused_is_network_error(
        self, client: BLTClient, api: StubAPI
    ) -> None:
        """An immediate connection failure is a NetworkError, not a timeout."""

        def refused(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        api.respond_with("GET", "/issues", refused)

        with pytest.raises(NetworkError) as exc_info:
            await client.request("/issues")

        assert not isinstance(exc_info.value, RequestTimeoutError)
        assert exc_info.value.details["cause_type"] == "ConnectError"

    @pytest.mark.asyncio
    async def test_network_error_hides_base_url(self, client: BLTClient, api: StubAPI) -> None:
        """Error text never leaks the configured API base URL."""

        def refused(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(f"cannot connect to {API_BASE}/issues", request=request)

        api.respond_with("GET", "/issues", refused)

        with pytest.raises(NetworkError) as exc_info:
            await client.request("/issues")

        assert API_BASE not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_each_call_is_independent(self, client: BLTClient, api: StubAPI) -> None:
        """A failure does not affect the next call; nothing is retried."""
        api.respond("GET", "/rewards", status=503)

        with pytest.raises(HttpError):
            await client.request("/rewards")
        assert await client.request("/leaderboards") == {"ok": True}
        assert [c.path for c in api.calls] == ["/rewards", "/leaderboards"]
