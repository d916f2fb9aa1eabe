"""Conversation gateway — assistant runs over a shared thread.

One assistant invocation walks these phases:

    created → message_posted → run_started → run_polling → run_completed

Polling is bounded: a run that has not completed after ``max_attempts``
status checks is abandoned with AssistantRunError.

Usage:
    async with AssistantsClient(api_key=key) as client:
        gateway = ConversationGateway(client)
        thread_id = await gateway.create_session()
        text = await gateway.invoke_assistant(thread_id, "asst_123", "Hello")
"""

import asyncio
import logging
from enum import Enum
from typing import Any

from brainrelay.clients.assistants import AssistantsClient
from brainrelay.clients.base import APIProviderError
from brainrelay.errors import AssistantRunError, SessionCreationError

logger = logging.getLogger(__name__)

# Run statuses the pipeline cannot recover from
_FAILED_STATUSES = {"failed", "cancelled", "cancelling", "expired", "incomplete"}
# Tool calls are not supported, so a run waiting on one never finishes
_UNSUPPORTED_STATUSES = {"requires_action"}


class RunPhase(str, Enum):
    """Progress of one assistant invocation."""

    CREATED = "created"
    MESSAGE_POSTED = "message_posted"
    RUN_STARTED = "run_started"
    RUN_POLLING = "run_polling"
    RUN_COMPLETED = "run_completed"


def extract_text(message: dict[str, Any]) -> str:
    """Join the text blocks of a message into plain text.

    Assistants API v2 messages carry a list of content blocks; only
    ``{"type": "text", "text": {"value": ...}}`` blocks contribute. A bare
    string content is returned unchanged.
    """
    content = message.get("content")
    if isinstance(content, str):
        return content

    parts = []
    for block in content or []:
        if block.get("type") != "text":
            continue
        text = block.get("text")
        if isinstance(text, dict):
            parts.append(text.get("value", ""))
        elif isinstance(text, str):
            parts.append(text)
    return "\n".join(parts)


class ConversationGateway:
    """Thread and run management on top of the Assistants client.

    Args:
        client: Open AssistantsClient (inside its async context)
        poll_interval: Seconds to sleep between run status checks
        max_attempts: Status checks before giving up on a run
    """

    def __init__(
        self,
        client: AssistantsClient,
        poll_interval: float = 2.0,
        max_attempts: int = 150,
    ) -> None:
        self.client = client
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    async def create_session(self) -> str:
        """Open a new thread.

        Returns:
            Thread id issued by the remote API

        Raises:
            SessionCreationError: If the remote call fails
        """
        try:
            thread = await self.client.create_thread()
        except APIProviderError as e:
            logger.error("Error creating thread: %s %s", e, e.response_body or "")
            raise SessionCreationError("Failed to create a new thread.") from e

        thread_id = thread.get("id")
        if not thread_id:
            raise SessionCreationError("Thread response did not include an id.")

        logger.info("Created thread %s", thread_id)
        return thread_id

    async def invoke_assistant(
        self,
        thread_id: str,
        assistant_id: str,
        input_text: str,
    ) -> str:
        """Post input_text to the thread, run the assistant and return its reply.

        The reply is the text of the last message in the thread (ascending
        creation order) once the run has completed.

        Args:
            thread_id: Thread shared by the whole pipeline
            assistant_id: Assistant to run
            input_text: User message content

        Returns:
            Plain text of the newest message

        Raises:
            AssistantRunError: If any remote call fails, the run ends in a
                non-completed state, or polling exceeds max_attempts
        """
        phase = RunPhase.CREATED
        try:
            await self.client.add_message(thread_id, input_text)
            phase = RunPhase.MESSAGE_POSTED

            run = await self.client.create_run(thread_id, assistant_id)
            phase = RunPhase.RUN_STARTED
            logger.debug("Run %s started for %s", run.get("id"), assistant_id)

            phase = RunPhase.RUN_POLLING
            await self._wait_for_completion(thread_id, assistant_id, run)
            phase = RunPhase.RUN_COMPLETED

            messages = await self.client.list_messages(thread_id, order="asc")
        except APIProviderError as e:
            logger.error(
                "Error processing assistant (%s) during %s: %s %s",
                assistant_id, phase.value, e, e.response_body or "",
            )
            raise AssistantRunError(
                assistant_id,
                f"Failed to execute assistant ({assistant_id}).",
                phase=phase.value,
            ) from e

        if not messages:
            raise AssistantRunError(
                assistant_id,
                f"Assistant ({assistant_id}) completed without messages.",
                phase=phase.value,
            )

        return extract_text(messages[-1])

    async def _wait_for_completion(
        self,
        thread_id: str,
        assistant_id: str,
        run: dict[str, Any],
    ) -> None:
        """Poll the run until it completes, fails, or attempts run out."""
        run_id = run.get("id")
        if not run_id:
            raise AssistantRunError(
                assistant_id,
                f"Run for assistant ({assistant_id}) has no id.",
                phase=RunPhase.RUN_STARTED.value,
            )

        status = run.get("status")
        attempts = 0

        while status != "completed":
            if status in _FAILED_STATUSES or status in _UNSUPPORTED_STATUSES:
                error = run.get("last_error") or {}
                raise AssistantRunError(
                    assistant_id,
                    f"Run {run_id} for assistant ({assistant_id}) ended with "
                    f"status '{status}': {error.get('message', 'no details')}",
                    phase=RunPhase.RUN_POLLING.value,
                )

            if attempts >= self.max_attempts:
                raise AssistantRunError(
                    assistant_id,
                    f"Run {run_id} for assistant ({assistant_id}) did not complete "
                    f"after {attempts} status checks",
                    phase=RunPhase.RUN_POLLING.value,
                )

            await asyncio.sleep(self.poll_interval)
            run = await self.client.get_run(thread_id, run_id)
            status = run.get("status")
            attempts += 1
            logger.debug("Run %s status=%s (check %d)", run_id, status, attempts)
