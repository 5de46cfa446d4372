"""Data models for the CAIC Field Report Aggregator."""

from .aggregation import (
    AggregatedData,
    Aspect,
    ElevationBand,
    InstabilityLevel,
    TextCollections,
)
from .api import (
    ChatRequest,
    ChatResponse,
    FetchReportsRequest,
    ProgressEvent,
    ReportResponse,
    SynthesizedSummaries,
)
from .field_report import (
    AvalancheObservation,
    FieldReport,
    SnowpackDetail,
    SnowpackObservation,
    WeatherDetail,
    WeatherObservation,
)

__all__ = [
    "AggregatedData",
    "Aspect",
    "ElevationBand",
    "InstabilityLevel",
    "TextCollections",
    "ChatRequest",
    "ChatResponse",
    "FetchReportsRequest",
    "ProgressEvent",
    "ReportResponse",
    "SynthesizedSummaries",
    "AvalancheObservation",
    "FieldReport",
    "SnowpackDetail",
    "SnowpackObservation",
    "WeatherDetail",
    "WeatherObservation",
]
