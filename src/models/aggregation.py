"""Classification categories and the aggregated report snapshot."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ElevationBand(str, Enum):
    """Elevation relative to treeline."""

    ABOVE_TREELINE = "aboveTreeline"
    NEAR_TREELINE = "nearTreeline"
    BELOW_TREELINE = "belowTreeline"
    UNCLASSIFIED = "unclassified"  # Matched no treeline marker


class Aspect(str, Enum):
    """Eight-point compass direction a slope faces."""

    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"
    UNCLASSIFIED = "unclassified"


class InstabilityLevel(str, Enum):
    """Ordered severity of a cracking or collapsing observation."""

    NONE = "None"
    MINOR = "Minor"
    MODERATE = "Moderate"
    MAJOR = "Major"
    SEVERE = "Severe"


# Counter buckets, in display order. Unclassified results have no bucket.
ELEVATION_BUCKETS: list[ElevationBand] = [
    ElevationBand.ABOVE_TREELINE,
    ElevationBand.NEAR_TREELINE,
    ElevationBand.BELOW_TREELINE,
]
ASPECT_BUCKETS: list[Aspect] = [a for a in Aspect if a is not Aspect.UNCLASSIFIED]
INSTABILITY_BUCKETS: list[InstabilityLevel] = list(InstabilityLevel)


def _zero_counts(buckets: list[Enum]) -> dict[str, int]:
    return {bucket.value: 0 for bucket in buckets}


class AggregatedData(BaseModel):
    """Fixed-shape statistics for one day of field reports.

    Serializes with camelCase keys (``totalReports``,
    ``avalanchesByElevation`` ...). Every counter map carries all of its
    buckets, zeroed until incremented.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_reports: int = 0
    reports_with_avalanches: int = 0
    total_avalanches: int = 0
    avalanches_by_elevation: dict[str, int] = Field(
        default_factory=lambda: _zero_counts(ELEVATION_BUCKETS)
    )
    avalanches_by_aspect: dict[str, int] = Field(
        default_factory=lambda: _zero_counts(ASPECT_BUCKETS)
    )
    cracking_counts: dict[str, int] = Field(
        default_factory=lambda: _zero_counts(INSTABILITY_BUCKETS)
    )
    collapsing_counts: dict[str, int] = Field(
        default_factory=lambda: _zero_counts(INSTABILITY_BUCKETS)
    )


class TextCollections(BaseModel):
    """Trimmed free-text snippets gathered from reports for summarization."""

    observations: list[str] = Field(default_factory=list)
    snowpack: list[str] = Field(default_factory=list)
    weather: list[str] = Field(default_factory=list)
