"""Tests for base async client."""

import json

import httpx
import pytest

from brainrelay.clients.base import APIProviderError, BaseAsyncClient


@pytest.fixture
def no_sleep(monkeypatch):
    """Skip retry backoff delays."""
    async def _sleep(_seconds):
        return None

    monkeypatch.setattr("brainrelay.clients.base.asyncio.sleep", _sleep)


class TestBaseAsyncClient:
    """Tests for base async HTTP client."""

    @pytest.mark.asyncio
    async def test_context_manager_lifecycle(self, respx_mock):
        """Client should properly initialize and cleanup."""
        respx_mock.get("https://api.example.com/test").mock(
            return_value=httpx.Response(200, json={"status": "ok"})
        )

        async with BaseAsyncClient(
            base_url="https://api.example.com",
            headers={"Authorization": "test_key"},
        ) as client:
            assert client._client is not None
            result = await client.get("/test")
            assert result == {"status": "ok"}

        assert client._client is None

    @pytest.mark.asyncio
    async def test_raises_if_used_without_context_manager(self):
        """Client should raise if used without async with."""
        client = BaseAsyncClient(base_url="https://api.example.com")

        with pytest.raises(RuntimeError, match="not initialized"):
            await client.get("/test")

    @pytest.mark.asyncio
    async def test_request_adds_leading_slash(self, respx_mock):
        """Requests should work with or without leading slash."""
        respx_mock.get("https://api.example.com/test").mock(
            return_value=httpx.Response(200, json={"data": "value"})
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            result1 = await client.get("/test")
            result2 = await client.get("test")

            assert result1 == {"data": "value"}
            assert result2 == {"data": "value"}

    @pytest.mark.asyncio
    async def test_sends_default_headers(self, respx_mock):
        """Default headers go out with every request."""
        route = respx_mock.get("https://api.example.com/test").mock(
            return_value=httpx.Response(200, json={})
        )

        async with BaseAsyncClient(
            base_url="https://api.example.com",
            headers={"Authorization": "Bearer abc"},
        ) as client:
            await client.get("/test")

        assert route.calls[0].request.headers["Authorization"] == "Bearer abc"

    @pytest.mark.asyncio
    async def test_handles_http_errors(self, respx_mock):
        """Client should raise APIProviderError on HTTP errors."""
        respx_mock.get("https://api.example.com/error").mock(
            return_value=httpx.Response(404, text="Not Found")
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError) as exc_info:
                await client.get("/error")

            assert exc_info.value.status_code == 404
            assert "Not Found" in exc_info.value.response_body

    @pytest.mark.asyncio
    async def test_handles_invalid_json(self, respx_mock):
        """Client should raise APIProviderError on invalid JSON."""
        respx_mock.get("https://api.example.com/invalid").mock(
            return_value=httpx.Response(200, text="not json")
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError, match="Invalid JSON"):
                await client.get("/invalid")

    @pytest.mark.asyncio
    async def test_post_convenience_method(self, respx_mock):
        """post() should send the JSON body."""
        route = respx_mock.post("https://api.example.com/submit").mock(
            return_value=httpx.Response(200, json={"created": True})
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            result = await client.post("/submit", json_data={"name": "x"})

        assert result == {"created": True}
        assert json.loads(route.calls[0].request.content) == {"name": "x"}

    @pytest.mark.asyncio
    async def test_network_error_wrapped(self, respx_mock):
        """Transport failures surface as APIProviderError."""
        respx_mock.get("https://api.example.com/down").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError, match="Network error"):
                await client.get("/down")

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self, respx_mock):
        """Timeouts surface as APIProviderError."""
        respx_mock.get("https://api.example.com/slow").mock(
            side_effect=httpx.ReadTimeout("timed out")
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError, match="Request timeout"):
                await client.get("/slow")


class TestRetries:
    """Retry policy: GET only, opt-in."""

    @pytest.mark.asyncio
    async def test_no_retry_by_default(self, respx_mock):
        """With max_retries=0 a 503 fails on the first attempt."""
        route = respx_mock.get("https://api.example.com/flaky").mock(
            return_value=httpx.Response(503, text="unavailable")
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError):
                await client.get("/flaky")

        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_get_retried_on_transient_status(self, respx_mock, no_sleep):
        """GET requests are retried on 503 when enabled."""
        route = respx_mock.get("https://api.example.com/flaky").mock(
            side_effect=[
                httpx.Response(503, text="unavailable"),
                httpx.Response(200, json={"ok": True}),
            ]
        )

        async with BaseAsyncClient(
            base_url="https://api.example.com",
            max_retries=2,
        ) as client:
            result = await client.get("/flaky")

        assert result == {"ok": True}
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_get_gives_up_after_max_retries(self, respx_mock, no_sleep):
        """Exhausted retries raise the last error."""
        route = respx_mock.get("https://api.example.com/flaky").mock(
            return_value=httpx.Response(502, text="bad gateway")
        )

        async with BaseAsyncClient(
            base_url="https://api.example.com",
            max_retries=2,
        ) as client:
            with pytest.raises(APIProviderError) as exc_info:
                await client.get("/flaky")

        assert exc_info.value.status_code == 502
        assert route.call_count == 3

    @pytest.mark.asyncio
    async def test_post_never_retried(self, respx_mock, no_sleep):
        """POST requests create remote state and are not retried."""
        route = respx_mock.post("https://api.example.com/create").mock(
            return_value=httpx.Response(503, text="unavailable")
        )

        async with BaseAsyncClient(
            base_url="https://api.example.com",
            max_retries=3,
        ) as client:
            with pytest.raises(APIProviderError):
                await client.post("/create", json_data={})

        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_non_retryable_status_fails_fast(self, respx_mock, no_sleep):
        """4xx errors other than 429 are not retried."""
        route = respx_mock.get("https://api.example.com/missing").mock(
            return_value=httpx.Response(404, text="nope")
        )

        async with BaseAsyncClient(
            base_url="https://api.example.com",
            max_retries=3,
        ) as client:
            with pytest.raises(APIProviderError):
                await client.get("/missing")

        assert route.call_count == 1
