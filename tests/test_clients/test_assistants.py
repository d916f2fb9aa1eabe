"""Tests for the OpenAI Assistants API client."""

import json

import httpx
import pytest

from brainrelay.clients.assistants import AssistantsClient
from brainrelay.clients.base import APIProviderError

BASE = "https://api.openai.com/v1"


class TestAssistantsClient:
    """Tests for Assistants API endpoints."""

    @pytest.mark.asyncio
    async def test_create_thread(self, respx_mock):
        """Should POST an empty body to /threads."""
        route = respx_mock.post(f"{BASE}/threads").mock(
            return_value=httpx.Response(200, json={"id": "thread_abc", "object": "thread"})
        )

        async with AssistantsClient(api_key="sk-test-123456") as client:
            thread = await client.create_thread()

        assert thread["id"] == "thread_abc"
        assert json.loads(route.calls[0].request.content) == {}

    @pytest.mark.asyncio
    async def test_auth_and_beta_headers(self, respx_mock):
        """Requests carry the bearer credential and protocol header."""
        route = respx_mock.post(f"{BASE}/threads").mock(
            return_value=httpx.Response(200, json={"id": "thread_abc"})
        )

        async with AssistantsClient(api_key="sk-secret-987654") as client:
            await client.create_thread()

        headers = route.calls[0].request.headers
        assert headers["Authorization"] == "Bearer sk-secret-987654"
        assert headers["OpenAI-Beta"] == "assistants=v2"

    @pytest.mark.asyncio
    async def test_custom_beta_header(self, respx_mock):
        """The protocol header value is configurable."""
        route = respx_mock.post(f"{BASE}/threads").mock(
            return_value=httpx.Response(200, json={"id": "thread_abc"})
        )

        async with AssistantsClient(api_key="sk-test-123456", beta="assistants=v3") as client:
            await client.create_thread()

        assert route.calls[0].request.headers["OpenAI-Beta"] == "assistants=v3"

    @pytest.mark.asyncio
    async def test_add_message(self, respx_mock):
        """Should post a user-role message."""
        route = respx_mock.post(f"{BASE}/threads/thread_abc/messages").mock(
            return_value=httpx.Response(200, json={"id": "msg_1"})
        )

        async with AssistantsClient(api_key="sk-test-123456") as client:
            await client.add_message("thread_abc", "I help coaches build...")

        body = json.loads(route.calls[0].request.content)
        assert body == {"role": "user", "content": "I help coaches build..."}

    @pytest.mark.asyncio
    async def test_create_run(self, respx_mock):
        """Should start a run with the assistant id."""
        route = respx_mock.post(f"{BASE}/threads/thread_abc/runs").mock(
            return_value=httpx.Response(200, json={"id": "run_1", "status": "queued"})
        )

        async with AssistantsClient(api_key="sk-test-123456") as client:
            run = await client.create_run("thread_abc", "asst_master")

        assert run == {"id": "run_1", "status": "queued"}
        assert json.loads(route.calls[0].request.content) == {"assistant_id": "asst_master"}

    @pytest.mark.asyncio
    async def test_get_run(self, respx_mock):
        """Should fetch a run by id."""
        respx_mock.get(f"{BASE}/threads/thread_abc/runs/run_1").mock(
            return_value=httpx.Response(200, json={"id": "run_1", "status": "completed"})
        )

        async with AssistantsClient(api_key="sk-test-123456") as client:
            run = await client.get_run("thread_abc", "run_1")

        assert run["status"] == "completed"

    @pytest.mark.asyncio
    async def test_list_messages_ascending(self, respx_mock):
        """Should request ascending order and unwrap the data list."""
        route = respx_mock.get(
            f"{BASE}/threads/thread_abc/messages",
            params={"order": "asc", "limit": "100"},
        ).mock(
            return_value=httpx.Response(200, json={
                "object": "list",
                "data": [{"id": "msg_1"}, {"id": "msg_2"}],
            })
        )

        async with AssistantsClient(api_key="sk-test-123456") as client:
            messages = await client.list_messages("thread_abc")

        assert [m["id"] for m in messages] == ["msg_1", "msg_2"]
        assert route.called

    @pytest.mark.asyncio
    async def test_list_messages_missing_data(self, respx_mock):
        """A response without data yields an empty list."""
        respx_mock.get(f"{BASE}/threads/thread_abc/messages").mock(
            return_value=httpx.Response(200, json={"object": "list"})
        )

        async with AssistantsClient(api_key="sk-test-123456") as client:
            assert await client.list_messages("thread_abc") == []

    @pytest.mark.asyncio
    async def test_error_status_raises(self, respx_mock):
        """Non-2xx responses raise APIProviderError with the body."""
        respx_mock.post(f"{BASE}/threads").mock(
            return_value=httpx.Response(401, json={"error": {"message": "bad key"}})
        )

        async with AssistantsClient(api_key="sk-test-123456") as client:
            with pytest.raises(APIProviderError) as exc_info:
                await client.create_thread()

        assert exc_info.value.status_code == 401
        assert "bad key" in exc_info.value.response_body

    @pytest.mark.asyncio
    async def test_custom_base_url(self, respx_mock):
        """Requests go to the configured base URL."""
        respx_mock.post("https://proxy.internal/v1/threads").mock(
            return_value=httpx.Response(200, json={"id": "thread_p"})
        )

        async with AssistantsClient(
            api_key="sk-test-123456",
            base_url="https://proxy.internal/v1/",
        ) as client:
            thread = await client.create_thread()

        assert thread["id"] == "thread_p"
