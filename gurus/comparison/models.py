"""Pydantic schemas for topics, pipeline output and raw LLM JSON payloads."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gurus.worldviews import Worldview


class TopicCreate(BaseModel):
    """Request body for submitting a topic."""
    content: str = Field(..., max_length=2000)
    model: Optional[str] = None
    provider: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Topic cannot be empty")
        return value.strip()


class ChartDataset(BaseModel):
    label: str
    data: List[int]
    backgroundColor: str
    borderColor: str
    borderWidth: int = 1


class ChartData(BaseModel):
    labels: List[str]
    datasets: List[ChartDataset]


class WorldviewComparison(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    worldview: Worldview
    summary: str
    keyConcepts: List[str]
    afterlifeType: str


class ChartPayload(BaseModel):
    """What the chart prompt asks the model to return.

    Only the shape is checked here; individual scores are repaired by the
    sanitizer.
    """
    metrics: List[Any] = Field(..., min_length=1)
    scores: Dict[str, Any]


class ComparisonEntry(BaseModel):
    """One worldview's entry in the comparisons JSON.

    Optional fields default one by one, so a usable summary is never lost to
    a null sibling.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    summary: str = Field(..., min_length=1)
    keyConcepts: List[str] = Field(default_factory=list)
    afterlifeType: str = ""

    @field_validator("afterlifeType", mode="before")
    @classmethod
    def coerce_afterlife(cls, value: Any) -> Any:
        return value if isinstance(value, str) else ""

    @field_validator("keyConcepts", mode="before")
    @classmethod
    def coerce_concepts(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        if isinstance(value, list):
            return [str(v) for v in value if str(v).strip()]
        return value


class ProcessingTimes(BaseModel):
    """Wall-clock milliseconds spent in each pipeline step."""
    expertResponses: float = 0.0
    summary: float = 0.0
    chartData: float = 0.0
    comparisons: float = 0.0


class ProcessDetails(BaseModel):
    executionPath: List[str] = Field(default_factory=list)
    processingTimeMs: ProcessingTimes = Field(default_factory=ProcessingTimes)
    expertResponses: Dict[str, str] = Field(default_factory=dict)
    summaryPrompt: str = ""
    chartDataPrompt: str = ""
    comparisonsPrompt: str = ""
    errors: List[str] = Field(default_factory=list)


class PipelineResult(BaseModel):
    summary: str
    chartData: ChartData
    comparisons: List[WorldviewComparison]
    processDetails: ProcessDetails


class TopicResponse(BaseModel):
    id: int
    content: str
    model: Optional[str] = None
    provider: Optional[str] = None
    createdAt: str


class ResponseRecord(BaseModel):
    id: int
    topicId: int
    summary: str
    chartData: ChartData
    comparisons: List[WorldviewComparison]
    createdAt: str


class TopicWithResponse(BaseModel):
    topic: TopicResponse
    response: ResponseRecord
