"""Request and response models for the report aggregator API."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .aggregation import AggregatedData
from .field_report import FieldReport


class FetchReportsRequest(BaseModel):
    """Request body for aggregating a day of field reports."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: str = Field(..., description="Observation date, YYYY-MM-DD")
    include_raw_reports: bool = Field(
        False, description="Echo the validated reports back in the response"
    )


class SynthesizedSummaries(BaseModel):
    """LLM-written prose summaries for each text category."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    observation_summary: str
    snowpack_summary: str
    weather_summary: str


class ReportResponse(BaseModel):
    """Full response for a single date."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: str
    aggregated_data: AggregatedData
    summaries: SynthesizedSummaries
    raw_reports: list[FieldReport] | None = None


class ChatRequest(BaseModel):
    """Request body for asking a question about the aggregated data."""

    message: str = Field(
        ..., min_length=1, max_length=2000, description="User question text"
    )
    context: AggregatedData | None = Field(
        None, description="Aggregated data the question refers to"
    )
    summaries: SynthesizedSummaries | None = None


class ChatResponse(BaseModel):
    """Response from the chat endpoint."""

    response: str = Field(..., description="Assistant response text")


class ProgressEvent(BaseModel):
    """A single progress update pushed to a streaming client."""

    stage: str = Field(..., description="Pipeline stage, e.g. 'fetching'")
    progress: int = Field(..., ge=0, le=100, description="Percent complete")
    message: str
