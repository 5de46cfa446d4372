"""Tests for data models."""

import pytest
from pydantic import ValidationError

from models.aggregation import (
    ASPECT_BUCKETS,
    ELEVATION_BUCKETS,
    AggregatedData,
    Aspect,
    ElevationBand,
    InstabilityLevel,
)
from models.api import (
    ChatRequest,
    FetchReportsRequest,
    ProgressEvent,
    ReportResponse,
    SynthesizedSummaries,
)
from models.field_report import FieldReport


class TestFieldReport:
    """Test cases for FieldReport parsing."""

    def test_full_record(self, sample_report):
        """Test a complete API record parses with nested observations."""
        assert sample_report.id == 101
        assert sample_report.backcountry_zone == "Front Range"
        assert sample_report.avalanche_observations[0].elevation == "&#62;TL"
        assert sample_report.snowpack_observations[0].cracking == "Moderate"
        assert sample_report.weather_observations[0].comments == "Moderate W winds"
        assert sample_report.snowpack_detail.description == "Buried facets 40cm down."

    def test_minimal_record_defaults(self):
        """Test only the id is required and collections default to empty."""
        report = FieldReport(id=7)

        assert report.avalanche_observations == []
        assert report.snowpack_observations == []
        assert report.weather_observations == []
        assert report.avalanche_observations_count == 0
        assert report.snowpack_detail is None
        assert report.observation_summary is None

    def test_nulls_treated_as_absent(self):
        """Test explicit nulls become empty collections and a zero count."""
        report = FieldReport.model_validate(
            {
                "id": 7,
                "avalanche_observations": None,
                "snowpack_observations": None,
                "weather_observations": None,
                "avalanche_observations_count": None,
                "snowpack_detail": None,
            }
        )

        assert report.avalanche_observations == []
        assert report.snowpack_observations == []
        assert report.weather_observations == []
        assert report.avalanche_observations_count == 0

    def test_unknown_fields_ignored(self, sample_report):
        """Test extra upstream fields are dropped."""
        assert not hasattr(sample_report, "some_future_field")

    def test_missing_id_rejected(self):
        """Test a record without an id fails validation."""
        with pytest.raises(ValidationError):
            FieldReport.model_validate({"description": "no id"})


class TestAggregationModels:
    """Test cases for classification enums and AggregatedData."""

    def test_enum_values(self):
        """Test enum values match the serialized bucket keys."""
        assert ElevationBand.ABOVE_TREELINE == "aboveTreeline"
        assert Aspect.NW == "NW"
        assert InstabilityLevel.NONE == "None"
        assert [level.value for level in InstabilityLevel] == [
            "None",
            "Minor",
            "Moderate",
            "Major",
            "Severe",
        ]

    def test_buckets_exclude_unclassified(self):
        """Test unclassified results have no counter bucket."""
        assert ElevationBand.UNCLASSIFIED not in ELEVATION_BUCKETS
        assert Aspect.UNCLASSIFIED not in ASPECT_BUCKETS
        assert len(ASPECT_BUCKETS) == 8

    def test_default_snapshot_is_zeroed(self):
        """Test a new snapshot has every bucket at zero."""
        data = AggregatedData()

        assert data.avalanches_by_elevation == {
            "aboveTreeline": 0,
            "nearTreeline": 0,
            "belowTreeline": 0,
        }
        assert data.avalanches_by_aspect == {a.value: 0 for a in ASPECT_BUCKETS}
        assert data.cracking_counts == {level.value: 0 for level in InstabilityLevel}

    def test_snapshots_do_not_share_counters(self):
        """Test each snapshot owns its counter maps."""
        first = AggregatedData()
        first.cracking_counts["None"] += 1
        assert AggregatedData().cracking_counts["None"] == 0

    def test_parses_camel_case(self):
        """Test a snapshot round-trips from the API's camelCase JSON."""
        data = AggregatedData.model_validate(
            {"totalReports": 3, "crackingCounts": {"None": 3}}
        )
        assert data.total_reports == 3
        assert data.cracking_counts == {"None": 3}


class TestApiModels:
    """Test cases for request/response models."""

    def test_fetch_request_defaults(self):
        """Test raw reports are excluded unless requested."""
        request = FetchReportsRequest(date="2025-01-12")
        assert request.include_raw_reports is False

    def test_fetch_request_camel_case(self):
        """Test the raw-reports flag accepts camelCase."""
        request = FetchReportsRequest.model_validate(
            {"date": "2025-01-12", "includeRawReports": True}
        )
        assert request.include_raw_reports is True

    def test_chat_request_requires_message(self):
        """Test empty chat messages are rejected."""
        with pytest.raises(ValidationError):
            ChatRequest(message="")

    def test_chat_request_with_context(self):
        """Test chat context parses from camelCase JSON."""
        request = ChatRequest.model_validate(
            {
                "message": "How many avalanches?",
                "context": {"totalReports": 2, "totalAvalanches": 3},
                "summaries": {
                    "observationSummary": "o",
                    "snowpackSummary": "s",
                    "weatherSummary": "w",
                },
            }
        )
        assert request.context.total_avalanches == 3
        assert request.summaries.weather_summary == "w"

    def test_report_response_serializes_camel_case(self):
        """Test the full response dumps with camelCase keys."""
        response = ReportResponse(
            date="2025-01-12",
            aggregated_data=AggregatedData(total_reports=1),
            summaries=SynthesizedSummaries(
                observation_summary="o", snowpack_summary="s", weather_summary="w"
            ),
        )
        data = response.model_dump(by_alias=True)

        assert data["aggregatedData"]["totalReports"] == 1
        assert data["summaries"]["observationSummary"] == "o"
        assert data["rawReports"] is None

    @pytest.mark.parametrize("progress", [-1, 101])
    def test_progress_bounds(self, progress):
        """Test progress must be a percentage."""
        with pytest.raises(ValidationError):
            ProgressEvent(stage="fetching", progress=progress, message="x")
