"""Steps 2-4: summary, chart data and comparisons from the expert responses.

The three generators take the same input and never depend on each other's
output. Each catches its own failure and returns fallback content together
with an error string for the diagnostics.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from gurus.comparison.chart import default_chart_data, sanitize_chart_data
from gurus.comparison.models import ChartData, ComparisonEntry, WorldviewComparison
from gurus.comparison.prompts import (
    SUMMARY_SYSTEM_PROMPT, SUMMARY_PROMPT, SUMMARY_FALLBACK,
    CHART_SYSTEM_PROMPT, CHART_PROMPT,
    COMPARISONS_SYSTEM_PROMPT, COMPARISONS_PROMPT,
)
from gurus.worldviews import Worldview, capitalize

logger = logging.getLogger(__name__)

PLACEHOLDER_CONCEPTS = ["No data available"]
PLACEHOLDER_AFTERLIFE = "Unknown"
PLACEHOLDER_SUMMARY = "No summary available."


def format_expert_responses(responses: Mapping[Worldview, str]) -> str:
    """One section per worldview: display name as header, response below."""
    sections = []
    for worldview in Worldview:
        if worldview in responses:
            sections.append(f"### {worldview.display_name}\n{responses[worldview]}")
    return "\n\n".join(sections)


def _worldview_list() -> str:
    return ", ".join(wv.value for wv in Worldview)


def build_summary_prompt(topic: str, expert_text: str) -> str:
    return SUMMARY_PROMPT.format(topic=topic, expert_responses=expert_text)


def build_chart_prompt(topic: str, expert_text: str) -> str:
    return CHART_PROMPT.format(
        topic=topic, expert_responses=expert_text, worldviews=_worldview_list()
    )


def build_comparisons_prompt(topic: str, expert_text: str) -> str:
    return COMPARISONS_PROMPT.format(
        topic=topic, expert_responses=expert_text, worldviews=_worldview_list()
    )


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

async def generate_summary(
    llm, topic: str, expert_text: str, model: Optional[str] = None
) -> Tuple[str, Optional[str]]:
    """Prose synthesis of similarities and differences. No retry."""
    try:
        summary = await llm.complete(
            build_summary_prompt(topic, expert_text),
            system=SUMMARY_SYSTEM_PROMPT,
            model=model,
        )
        summary = (summary or "").strip()
        if not summary:
            raise ValueError("empty summary")
        return summary, None
    except Exception as e:
        logger.warning("Summary generation failed for '%s': %s", topic, e)
        return SUMMARY_FALLBACK.format(topic=topic), f"Failed to generate summary: {e}"


# ---------------------------------------------------------------------------
# Chart data
# ---------------------------------------------------------------------------

async def generate_chart_data(
    llm, topic: str, expert_text: str, model: Optional[str] = None
) -> Tuple[ChartData, Optional[str]]:
    """Radar chart data; any failure yields the deterministic default chart."""
    try:
        chart_json = await llm.complete_json(
            build_chart_prompt(topic, expert_text),
            system=CHART_SYSTEM_PROMPT,
            model=model,
        )
        return sanitize_chart_data(chart_json), None
    except Exception as e:
        logger.warning("Chart data generation failed for '%s': %s", topic, e)
        return default_chart_data(), f"Failed to generate chart data: {e}"


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------

def placeholder_comparison(worldview: Worldview, expert_response: Optional[str]) -> WorldviewComparison:
    """Entry built from the raw expert text when the model gave nothing usable."""
    return WorldviewComparison(
        worldview=worldview,
        summary=(expert_response or "").strip() or PLACEHOLDER_SUMMARY,
        keyConcepts=list(PLACEHOLDER_CONCEPTS),
        afterlifeType=PLACEHOLDER_AFTERLIFE,
    )


def _lookup_entry(data: Dict[str, Any], worldview: Worldview) -> Optional[ComparisonEntry]:
    raw = data.get(worldview.value)
    if raw is None:
        raw = data.get(capitalize(worldview.value))
    if raw is None:
        return None
    try:
        return ComparisonEntry.model_validate(raw)
    except ValidationError:
        return None


def build_comparisons(
    data: Any, expert_responses: Mapping[Worldview, str]
) -> Tuple[List[WorldviewComparison], List[str]]:
    """Exactly one comparison per worldview, in declaration order.

    Returns the comparisons and the worldviews that had to be backfilled.
    """
    if not isinstance(data, dict):
        data = {}

    comparisons = []
    backfilled = []
    for worldview in Worldview:
        entry = _lookup_entry(data, worldview)
        if entry is None:
            backfilled.append(worldview.value)
            comparisons.append(
                placeholder_comparison(worldview, expert_responses.get(worldview))
            )
            continue
        comparisons.append(WorldviewComparison(
            worldview=worldview,
            summary=entry.summary.strip(),
            keyConcepts=entry.keyConcepts or list(PLACEHOLDER_CONCEPTS),
            afterlifeType=entry.afterlifeType.strip() or PLACEHOLDER_AFTERLIFE,
        ))
    return comparisons, backfilled


async def generate_comparisons(
    llm,
    topic: str,
    expert_text: str,
    expert_responses: Mapping[Worldview, str],
    model: Optional[str] = None,
) -> Tuple[List[WorldviewComparison], Optional[str]]:
    """Per-worldview comparison rows; missing rows come from the expert text."""
    try:
        data = await llm.complete_json(
            build_comparisons_prompt(topic, expert_text),
            system=COMPARISONS_SYSTEM_PROMPT,
            model=model,
        )
    except Exception as e:
        logger.warning("Comparison generation failed for '%s': %s", topic, e)
        comparisons = [
            placeholder_comparison(wv, expert_responses.get(wv)) for wv in Worldview
        ]
        return comparisons, f"Failed to generate comparisons: {e}"

    comparisons, backfilled = build_comparisons(data, expert_responses)
    if backfilled:
        logger.info("Backfilled comparisons for: %s", ", ".join(backfilled))
    return comparisons, None
