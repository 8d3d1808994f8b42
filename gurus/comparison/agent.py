"""Comparison coordinator: single entry point for the full pipeline.

collectExpertResponses -> generateSummary -> generateChartData ->
generateComparisons -> done. Strictly sequential, no branching, no retry.
"""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Awaitable, Callable, Dict, List, Optional

from gurus.config import EXPERT_CONCURRENCY
from gurus.comparison.chart import default_chart_data
from gurus.comparison.collector import collect_expert_responses
from gurus.comparison.generators import (
    build_chart_prompt,
    build_comparisons_prompt,
    build_summary_prompt,
    format_expert_responses,
    generate_chart_data,
    generate_comparisons,
    generate_summary,
    placeholder_comparison,
)
from gurus.comparison.models import (
    ChartData,
    PipelineResult,
    ProcessDetails,
    ProcessingTimes,
    WorldviewComparison,
)
from gurus.comparison.prompts import SUMMARY_FALLBACK
from gurus.worldviews import Worldview

logger = logging.getLogger(__name__)

STEP_EXPERTS = "collectExpertResponses"
STEP_SUMMARY = "generateSummary"
STEP_CHART = "generateChartData"
STEP_COMPARISONS = "generateComparisons"


@dataclass(frozen=True)
class PipelineState:
    topic: str
    model: Optional[str] = None
    expert_responses: Dict[Worldview, str] = field(default_factory=dict)
    expert_text: str = ""
    summary: Optional[str] = None
    chart_data: Optional[ChartData] = None
    comparisons: Optional[List[WorldviewComparison]] = None
    errors: List[str] = field(default_factory=list)
    execution_path: List[str] = field(default_factory=list)
    timings_ms: Dict[str, float] = field(default_factory=dict)


Step = Callable[[PipelineState], Awaitable[PipelineState]]


class ComparisonCoordinator:
    """Runs the four steps against an LLM client and assembles the result."""

    def __init__(self, llm, concurrency: int = EXPERT_CONCURRENCY):
        self.llm = llm
        self.concurrency = concurrency

    # --- steps -------------------------------------------------------------

    async def collect(self, state: PipelineState) -> PipelineState:
        responses, errors = await collect_expert_responses(
            self.llm, state.topic, model=state.model, concurrency=self.concurrency
        )
        return replace(
            state,
            expert_responses=responses,
            expert_text=format_expert_responses(responses),
            errors=state.errors + errors,
        )

    async def summarize(self, state: PipelineState) -> PipelineState:
        summary, error = await generate_summary(
            self.llm, state.topic, state.expert_text, model=state.model
        )
        return replace(state, summary=summary, errors=state.errors + ([error] if error else []))

    async def chart(self, state: PipelineState) -> PipelineState:
        chart_data, error = await generate_chart_data(
            self.llm, state.topic, state.expert_text, model=state.model
        )
        return replace(state, chart_data=chart_data, errors=state.errors + ([error] if error else []))

    async def compare(self, state: PipelineState) -> PipelineState:
        comparisons, error = await generate_comparisons(
            self.llm, state.topic, state.expert_text, state.expert_responses, model=state.model
        )
        return replace(state, comparisons=comparisons, errors=state.errors + ([error] if error else []))

    def steps(self) -> List[tuple]:
        return [
            (STEP_EXPERTS, self.collect),
            (STEP_SUMMARY, self.summarize),
            (STEP_CHART, self.chart),
            (STEP_COMPARISONS, self.compare),
        ]

    # --- driver ------------------------------------------------------------

    async def _run_step(self, name: str, step: Step, state: PipelineState) -> PipelineState:
        state = replace(state, execution_path=state.execution_path + [name])
        started = time.perf_counter()
        try:
            state = await step(state)
        except Exception as e:
            # generators already degrade on their own; this covers bugs in the glue
            logger.exception("Pipeline step %s failed: %s", name, e)
            state = replace(state, errors=state.errors + [f"{name}: {e}"])
        elapsed = (time.perf_counter() - started) * 1000
        return replace(state, timings_ms={**state.timings_ms, name: round(elapsed, 2)})

    async def process_topic(self, topic: str, model: Optional[str] = None) -> PipelineResult:
        """
        Run the full pipeline for one topic.

        Never raises for provider or parsing failures: every missing output
        is replaced by fallback content.

        Returns:
            PipelineResult with summary, chartData, comparisons and the
            processDetails diagnostics for this request only.
        """
        logger.info("Processing topic: %s", topic)
        state = PipelineState(topic=topic, model=model)
        for name, step in self.steps():
            state = await self._run_step(name, step, state)

        result = PipelineResult(
            summary=state.summary or SUMMARY_FALLBACK.format(topic=topic),
            chartData=state.chart_data or default_chart_data(),
            comparisons=state.comparisons or [
                placeholder_comparison(wv, state.expert_responses.get(wv)) for wv in Worldview
            ],
            processDetails=self.process_details(state),
        )

        logger.info(
            "Pipeline complete for '%s': %d errors, %.0f ms total",
            topic, len(state.errors), sum(state.timings_ms.values()),
        )
        return result

    def process_details(self, state: PipelineState) -> ProcessDetails:
        return ProcessDetails(
            executionPath=list(state.execution_path),
            processingTimeMs=ProcessingTimes(
                expertResponses=state.timings_ms.get(STEP_EXPERTS, 0.0),
                summary=state.timings_ms.get(STEP_SUMMARY, 0.0),
                chartData=state.timings_ms.get(STEP_CHART, 0.0),
                comparisons=state.timings_ms.get(STEP_COMPARISONS, 0.0),
            ),
            expertResponses={wv.value: text for wv, text in state.expert_responses.items()},
            summaryPrompt=build_summary_prompt(state.topic, state.expert_text),
            chartDataPrompt=build_chart_prompt(state.topic, state.expert_text),
            comparisonsPrompt=build_comparisons_prompt(state.topic, state.expert_text),
            errors=list(state.errors),
        )


PROCESS_EXPLANATION = [
    "Your topic was sent to one expert prompt per worldview, all at the same time.",
    "Each expert answered in 1-2 neutral sentences; any expert that failed was "
    "replaced by a placeholder sentence.",
    "The combined expert answers were summarized into a single comparison paragraph.",
    "The same answers were scored on four concepts to build the radar chart.",
    "Finally, a structured comparison row was generated for every worldview.",
]
