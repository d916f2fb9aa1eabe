"""OpenAI Assistants API client.

Provides async access to the thread, message and run endpoints used by the
relay pipeline (Assistants API v2).

API Documentation: https://platform.openai.com/docs/api-reference/assistants

Usage:
    from brainrelay.clients.assistants import AssistantsClient

    async with AssistantsClient(api_key="sk-...") as client:
        thread = await client.create_thread()
        await client.add_message(thread["id"], "Hello")
        run = await client.create_run(thread["id"], assistant_id="asst_123")
"""

from typing import Any

from brainrelay.clients.base import BaseAsyncClient


class AssistantsClient(BaseAsyncClient):
    """Async client for the OpenAI Assistants API.

    Args:
        api_key: OpenAI API key, sent as a bearer credential
        base_url: API base URL (default: https://api.openai.com/v1)
        beta: Value of the OpenAI-Beta protocol header (default: assistants=v2)
        timeout: Request timeout in seconds
        max_retries: Retries for GET requests on transient failures
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        beta: str = "assistants=v2",
        timeout: float = 60.0,
        max_retries: int = 0,
    ) -> None:
        super().__init__(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "OpenAI-Beta": beta,
            },
            timeout=timeout,
            max_retries=max_retries,
        )

    async def create_thread(self) -> dict[str, Any]:
        """Create an empty thread.

        Returns:
            Thread object. Has: id, object, created_at
        """
        return await self.post("/threads", json_data={})

    async def add_message(self, thread_id: str, content: str) -> dict[str, Any]:
        """Append a user message to a thread."""
        return await self.post(
            f"/threads/{thread_id}/messages",
            json_data={"role": "user", "content": content},
        )

    async def create_run(self, thread_id: str, assistant_id: str) -> dict[str, Any]:
        """Start a run of an assistant over the thread's messages.

        Returns:
            Run object. Has: id, status, assistant_id, thread_id
        """
        return await self.post(
            f"/threads/{thread_id}/runs",
            json_data={"assistant_id": assistant_id},
        )

    async def get_run(self, thread_id: str, run_id: str) -> dict[str, Any]:
        """Retrieve a run to check its status."""
        return await self.get(f"/threads/{thread_id}/runs/{run_id}")

    async def list_messages(
        self,
        thread_id: str,
        order: str = "asc",
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """List the messages in a thread.

        Args:
            thread_id: Thread to read
            order: 'asc' (oldest first) or 'desc' (default: 'asc')
            limit: Max messages to return (API maximum: 100)

        Returns:
            List of message objects.
            Each has: id, role, content (list of content blocks), run_id
        """
        result = await self.get(
            f"/threads/{thread_id}/messages",
            params={"order": order, "limit": limit},
        )
        return result.get("data", [])
