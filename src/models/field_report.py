"""Field report data models for CAIC observation reports.

Upstream records are loosely typed. Only the report ``id`` is strict; any
other field with an unexpected type is read as absent instead of rejecting
the whole report.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _text_or_none(v: Any) -> str | None:
    return v if isinstance(v, str) else None


class _Observation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Any = None
    comments: str | None = None

    @field_validator("comments", mode="before")
    @classmethod
    def text_fields(cls, v: Any) -> str | None:
        """Drop non-string free text."""
        return _text_or_none(v)


class AvalancheObservation(_Observation):
    """A single avalanche observed by the reporting party."""

    aspect: str | None = Field(None, description="Slope aspect, e.g. 'NE'")
    elevation: str | None = Field(
        None, description="Elevation band, e.g. '>TL' (may be HTML-escaped)"
    )
    type_code: Any = None
    trigger_code: Any = None
    size_relative: Any = None
    size_destructive: Any = None
    date: Any = None
    location: Any = None

    @field_validator("aspect", "elevation", mode="before")
    @classmethod
    def classified_fields(cls, v: Any) -> str | None:
        return _text_or_none(v)


class SnowpackObservation(_Observation):
    """Snowpack instability signs recorded at a single site."""

    cracking: str | None = Field(None, description="Free-text cracking severity")
    collapsing: str | None = Field(None, description="Free-text collapsing severity")

    @field_validator("cracking", "collapsing", mode="before")
    @classmethod
    def classified_fields(cls, v: Any) -> str | None:
        return _text_or_none(v)


class WeatherObservation(_Observation):
    """Weather recorded at a single site."""

    sky_cover: Any = None
    precipitation_type: Any = None
    precipitation_rate: Any = None
    air_temperature: Any = None
    wind_direction: Any = None
    wind_speed: Any = None


class SnowpackDetail(BaseModel):
    """Narrative snowpack section of a report."""

    model_config = ConfigDict(extra="ignore")

    description: str | None = None

    @field_validator("description", mode="before")
    @classmethod
    def text_description(cls, v: Any) -> str | None:
        return _text_or_none(v)


class WeatherDetail(SnowpackDetail):
    """Narrative weather section of a report."""


class FieldReport(BaseModel):
    """A backcountry field report as returned by the CAIC API.

    Only ``id`` is required. Collections default to empty and
    ``avalanche_observations_count`` defaults to zero, so a report with
    explicit nulls reads the same as one that omits the fields.
    """

    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., description="CAIC report identifier")
    type: Any = None
    backcountry_zone: Any = None
    observed_at: Any = Field(None, description="ISO timestamp of observation")
    description: str | None = None
    observation_summary: str | None = None
    avalanche_observations_count: int = Field(
        0, description="Avalanche count for reports without itemized observations"
    )
    avalanche_observations: list[AvalancheObservation] = Field(default_factory=list)
    snowpack_observations: list[SnowpackObservation] = Field(default_factory=list)
    weather_observations: list[WeatherObservation] = Field(default_factory=list)
    snowpack_detail: SnowpackDetail | None = None
    weather_detail: WeatherDetail | None = None

    @field_validator("description", "observation_summary", mode="before")
    @classmethod
    def text_fields(cls, v: Any) -> str | None:
        """Drop non-string free text."""
        return _text_or_none(v)

    @field_validator(
        "avalanche_observations",
        "snowpack_observations",
        "weather_observations",
        mode="before",
    )
    @classmethod
    def null_collection_to_empty(cls, v: Any) -> Any:
        """Treat a null or non-list collection as empty; drop non-object items."""
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, (dict, BaseModel))]

    @field_validator("snowpack_detail", "weather_detail", mode="before")
    @classmethod
    def detail_object_or_none(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, BaseModel)) else None

    @field_validator("avalanche_observations_count", mode="before")
    @classmethod
    def null_count_to_zero(cls, v: Any) -> int:
        """Treat a null or non-numeric avalanche count as zero."""
        if isinstance(v, bool):
            return 0
        try:
            return int(v)
        except (TypeError, ValueError):
            return 0
