"""Orchestrator — sequences assistant stages over one thread.

Pipeline:
  1. Validate the brain dump
  2. Open one thread for the whole run
  3. Look up the user's previous master file (informational)
  4. Run master_file → core_messaging → identity_profile → social_content →
     content_feedback, each stage fed the previous stage's output
  5. Run brand_analysis only when requested
  6. Persist every stage output right after it completes

Any stage failure aborts the remaining stages. Stages already persisted stay
committed. A failed persistence write does not abort anything.

Usage:
    async with open_orchestrator(settings) as orchestrator:
        result = await orchestrator.process("I help coaches build...", user_id="u1")
        print(result.to_response())
"""

import inspect
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from google.cloud import firestore

from brainrelay.clients.assistants import AssistantsClient
from brainrelay.config import Settings
from brainrelay.errors import AssistantRunError, ValidationError
from brainrelay.pipeline.conversation import ConversationGateway
from brainrelay.pipeline.stages import STAGES, PipelineResult, Stage, StageResult
from brainrelay.store.document_store import StageStore

logger = logging.getLogger(__name__)


def validate_brain_dump(brain_dump: str | None) -> str:
    """Return the brain dump if it has content, else raise ValidationError."""
    if brain_dump is None or not brain_dump.strip():
        raise ValidationError("Brain Dump is required")
    return brain_dump


class Orchestrator:
    """Runs the stage table against one conversation thread.

    Args:
        conversation: Gateway used for thread creation and assistant runs
        store: Document store for stage outputs
        assistant_ids: Stage name -> assistant id (None = not configured)
        stages: Stage table in execution order (default: STAGES)
    """

    def __init__(
        self,
        conversation: ConversationGateway,
        store: StageStore,
        assistant_ids: dict[str, str | None],
        stages: Iterable[Stage] = STAGES,
    ) -> None:
        self.conversation = conversation
        self.store = store
        self.assistant_ids = assistant_ids
        self.stages = tuple(stages)

    async def process(
        self,
        brain_dump: str | None,
        trigger_brand_analysis: bool = False,
        user_id: str = "default_user",
    ) -> PipelineResult:
        """Run the full pipeline for one brain dump.

        Args:
            brain_dump: Raw user text that seeds the first stage
            trigger_brand_analysis: Whether to run the optional stages
            user_id: Owner of the persisted stage documents

        Returns:
            PipelineResult with the thread id and every stage output

        Raises:
            ValidationError: If brain_dump is missing or blank
            SessionCreationError: If the thread cannot be created
            AssistantRunError: If any stage fails
        """
        text = validate_brain_dump(brain_dump)

        thread_id = await self.conversation.create_session()
        result = PipelineResult(thread_id=thread_id, user_id=user_id)

        if self.stages:
            previous = await self.store.get_latest(user_id, self.stages[0].collection)
            logger.debug(
                "Previous %s for %s: %d chars",
                self.stages[0].collection, user_id, len(previous),
            )

        for stage in self.stages:
            if stage.optional and not trigger_brand_analysis:
                logger.info("[%s] Skipped (not requested)", stage.name)
                continue

            stage_result = await self._run_stage(stage, thread_id, text, user_id)
            result.results[stage.name] = stage_result
            text = stage_result.content

        logger.info(
            "Pipeline finished on thread %s: %d stages",
            thread_id, len(result.results),
        )
        return result

    async def _run_stage(
        self,
        stage: Stage,
        thread_id: str,
        input_text: str,
        user_id: str,
    ) -> StageResult:
        """Invoke one stage's assistant and persist its output."""
        assistant_id = self.assistant_ids.get(stage.name)
        if not assistant_id:
            raise AssistantRunError(
                None,
                f"No assistant configured for stage '{stage.name}'.",
            )

        logger.info("[%s] Running assistant %s", stage.name, assistant_id)
        content = await self.conversation.invoke_assistant(thread_id, assistant_id, input_text)
        produced_at = datetime.now(timezone.utc)

        persisted = await self.store.save(user_id, stage.collection, content)
        if not persisted:
            logger.warning("[%s] Output not persisted; continuing", stage.name)

        logger.info("[%s] Done (%d chars)", stage.name, len(content))
        return StageResult(
            stage=stage.name,
            content=content,
            produced_at=produced_at,
            persisted=persisted,
        )


@asynccontextmanager
async def open_orchestrator(settings: Settings) -> AsyncIterator[Orchestrator]:
    """Build an Orchestrator with live clients for the duration of the block.

    The Assistants HTTP client and the Firestore client are opened here and
    closed on exit, including when startup or the block fails.
    """
    db = firestore.AsyncClient(
        project=settings.firestore_project_id,
        database=settings.firestore_database,
    )

    try:
        async with AssistantsClient(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            beta=settings.openai_beta,
            timeout=settings.request_timeout,
            max_retries=settings.http_max_retries,
        ) as client:
            yield Orchestrator(
                conversation=ConversationGateway(
                    client,
                    poll_interval=settings.poll_interval,
                    max_attempts=settings.poll_max_attempts,
                ),
                store=StageStore(db),
                assistant_ids=settings.assistant_ids(),
            )
    finally:
        await _close_firestore(db)


async def _close_firestore(db: firestore.AsyncClient) -> None:
    # close() is a coroutine on some library versions and plain on others
    closed = db.close()
    if inspect.isawaitable(closed):
        await closed
    logger.debug("Firestore client closed")
