"""Step 1: one expert prompt per worldview, sent concurrently."""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from gurus.comparison.prompts import EXPERT_FALLBACK, EXPERT_PROMPT, EXPERT_SYSTEM_PROMPT
from gurus.worldviews import Worldview

logger = logging.getLogger(__name__)


def expert_fallback(worldview: Worldview, topic: str) -> str:
    return EXPERT_FALLBACK.format(worldview=worldview.display_name, topic=topic)


async def ask_expert(
    llm,
    worldview: Worldview,
    topic: str,
    model: Optional[str] = None,
) -> str:
    """Ask a single worldview expert. Raises whatever the client raises."""
    return await llm.complete(
        EXPERT_PROMPT.format(topic=topic, worldview=worldview.value),
        system=EXPERT_SYSTEM_PROMPT.format(worldview=worldview.value),
        model=model,
    )


async def collect_expert_responses(
    llm,
    topic: str,
    model: Optional[str] = None,
    concurrency: int = 0,
) -> Tuple[Dict[Worldview, str], List[str]]:
    """
    Fan out one prompt per worldview and wait for all of them to settle.

    A failed worldview gets a templated fallback sentence; it never aborts
    its siblings and the call as a whole never raises.

    Args:
        llm: LLMClient (or anything with the same ``complete`` coroutine)
        topic: The user topic
        model: Optional model id for every expert call
        concurrency: Max in-flight requests, 0 for one per worldview

    Returns:
        (responses keyed by every Worldview, list of "worldview: error" strings)
    """
    semaphore = asyncio.Semaphore(concurrency) if concurrency > 0 else None

    async def run_one(worldview: Worldview) -> Tuple[Worldview, str, Optional[str]]:
        try:
            if semaphore is None:
                text = await ask_expert(llm, worldview, topic, model=model)
            else:
                async with semaphore:
                    text = await ask_expert(llm, worldview, topic, model=model)
            text = (text or "").strip()
            if not text:
                raise ValueError("empty response")
            return worldview, text, None
        except Exception as e:
            logger.warning("Expert %s failed for topic '%s': %s", worldview.value, topic, e)
            return worldview, expert_fallback(worldview, topic), str(e)

    results = await asyncio.gather(*(run_one(wv) for wv in Worldview))

    responses: Dict[Worldview, str] = {}
    errors: List[str] = []
    for worldview, text, error in results:
        responses[worldview] = text
        if error:
            errors.append(f"{worldview.value}: {error}")

    logger.info(
        "Collected %d expert responses (%d failed)", len(responses), len(errors)
    )
    return responses, errors
