"""Pytest configuration and shared fixtures."""

from unittest.mock import Mock

import pytest

from models.field_report import FieldReport


@pytest.fixture
def sample_report_data():
    """Raw CAIC report record as returned by the API."""
    return {
        "id": 101,
        "type": "report",
        "backcountry_zone": "Front Range",
        "observed_at": "2025-01-12T18:30:00Z",
        "description": "Toured up Loveland Pass.",
        "observation_summary": "Wind slabs reactive on leeward slopes.",
        "avalanche_observations_count": 2,
        "avalanche_observations": [
            {"id": 1, "aspect": "NE", "elevation": "&#62;TL", "type_code": "SS"},
            {"id": 2, "aspect": "N", "elevation": "TL", "trigger_code": "N"},
        ],
        "snowpack_observations": [
            {
                "id": 10,
                "cracking": "Moderate",
                "collapsing": "None",
                "comments": " Shooting cracks near ridge. ",
            },
        ],
        "weather_observations": [
            {
                "id": 20,
                "sky_cover": "Overcast",
                "wind_speed": "Strong",
                "comments": "Moderate W winds",
            },
        ],
        "snowpack_detail": {"description": "Buried facets 40cm down."},
        "weather_detail": {"description": "Snow showers through the afternoon."},
        "some_future_field": "ignored",
    }


@pytest.fixture
def sample_report(sample_report_data):
    """Validated FieldReport built from sample_report_data."""
    return FieldReport.model_validate(sample_report_data)


@pytest.fixture
def scenario_reports():
    """Two reports covering itemized and count-only avalanche data."""
    return [
        FieldReport.model_validate(
            {
                "id": 1,
                "avalanche_observations": [{"elevation": ">TL", "aspect": "N"}],
                "snowpack_observations": [],
            }
        ),
        FieldReport.model_validate(
            {
                "id": 2,
                "avalanche_observations_count": 2,
                "snowpack_observations": [{"cracking": "minor", "collapsing": "none"}],
            }
        ),
    ]


@pytest.fixture
def mock_bedrock_client():
    """Create a mock bedrock-runtime client returning a fixed summary."""
    client = Mock()
    client.converse.return_value = {
        "output": {"message": {"content": [{"text": "Generated summary"}]}},
        "stopReason": "end_turn",
    }
    return client
