"""Example 1: Process a brain dump

Runs the full assistant pipeline once, outside the HTTP server, and prints
every stage output. Requires a populated .env (see .env.example) and
Firestore credentials (GOOGLE_APPLICATION_CREDENTIALS or gcloud ADC).
"""

import asyncio
import logging

from brainrelay.config import get_settings
from brainrelay.pipeline import STAGES, open_orchestrator


BRAIN_DUMP = (
    "I help coaches build their first online program. Most of my clients "
    "have a following but no offer, and they struggle to explain what they do."
)


async def main() -> None:
    settings = get_settings()

    async with open_orchestrator(settings) as orchestrator:
        result = await orchestrator.process(
            BRAIN_DUMP,
            trigger_brand_analysis=True,
            user_id=settings.default_user_id,
        )

    print(f"Thread: {result.thread_id}")
    for stage in STAGES:
        content = result.output(stage.name)
        print()
        print(f"== {stage.name} ==")
        print(content if content is not None else "(skipped)")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    asyncio.run(main())
