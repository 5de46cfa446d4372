"""Services for the CAIC Field Report Aggregator backend."""

from .aggregation_service import aggregate_reports, collect_texts
from .caic_service import CAICService
from .classification_service import (
    classify_aspect,
    classify_elevation,
    classify_instability,
)
from .progress_service import ProgressTracker
from .summary_service import SummaryService

__all__ = [
    "aggregate_reports",
    "collect_texts",
    "classify_aspect",
    "classify_elevation",
    "classify_instability",
    "CAICService",
    "ProgressTracker",
    "SummaryService",
]
