"""Colorado Avalanche Information Center (CAIC) field report client."""

import logging
import os
import re
import time
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from models.field_report import FieldReport

logger = logging.getLogger(__name__)

CAIC_API_BASE_URL = os.environ.get(
    "CAIC_API_BASE_URL",
    "https://api.avalanche.state.co.us/api/v2/observation_reports",
)
CAIC_REQUEST_TIMEOUT = float(os.environ.get("CAIC_REQUEST_TIMEOUT", "30"))

# Retry configuration for API calls
MAX_RETRIES = 3
RETRY_DELAYS = [1, 2, 4]  # Exponential backoff: 1s, 2s, 4s
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

DATE_FORMAT_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class CAICAPIError(RuntimeError):
    """Raised when the CAIC API cannot return a usable report list."""


def is_valid_date_format(date: str) -> bool:
    """Check that a date is written as YYYY-MM-DD."""
    return bool(DATE_FORMAT_PATTERN.match(date))


def build_caic_url(date: str, base_url: str = CAIC_API_BASE_URL) -> str:
    """Build the observation-reports URL covering a single UTC day."""
    start_date = quote(f"{date}T00:00:01.000Z", safe="")
    end_date = quote(f"{date}T23:59:59.000Z", safe="")
    return (
        f"{base_url}?r[observed_at_gteq]={start_date}"
        f"&r[observed_at_lteq]={end_date}"
    )


def _is_retryable_error(exception: Exception) -> bool:
    """Check if an exception is retryable."""
    if isinstance(exception, requests.exceptions.Timeout):
        return True
    if isinstance(exception, requests.exceptions.ConnectionError):
        return True
    if isinstance(exception, requests.exceptions.HTTPError):
        response = exception.response
        if response is not None and response.status_code in RETRYABLE_STATUS_CODES:
            return True
    return False


def _request_with_retry(url: str, **kwargs) -> requests.Response:
    """GET a URL, retrying transient failures with exponential backoff.

    Raises:
        requests.exceptions.RequestException: If all retries fail
    """
    for attempt in range(MAX_RETRIES):
        try:
            response = requests.get(url, **kwargs)
            response.raise_for_status()
            return response
        except requests.exceptions.RequestException as e:
            if not _is_retryable_error(e) or attempt == MAX_RETRIES - 1:
                raise

            delay = RETRY_DELAYS[attempt]
            logger.warning(
                "Request to %s failed (attempt %d/%d): %s. Retrying in %ss...",
                url,
                attempt + 1,
                MAX_RETRIES,
                e,
                delay,
            )
            time.sleep(delay)


def parse_reports(records: list[Any]) -> list[FieldReport]:
    """Validate raw report records, skipping any that are malformed."""
    reports = []
    for record in records:
        try:
            reports.append(FieldReport.model_validate(record))
        except ValidationError as e:
            record_id = record.get("id") if isinstance(record, dict) else None
            logger.warning("Skipping invalid CAIC report %s: %s", record_id, e)
    return reports


class CAICService:
    """Fetches a day of field reports from the CAIC public API."""

    def __init__(
        self,
        base_url: str = CAIC_API_BASE_URL,
        timeout: float = CAIC_REQUEST_TIMEOUT,
    ):
        """Initialize the CAIC service.

        Args:
            base_url: Observation reports endpoint
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url
        self.timeout = timeout

    def fetch_reports(self, date: str) -> list[FieldReport]:
        """Fetch all field reports observed on a date.

        Args:
            date: Observation date, YYYY-MM-DD

        Returns:
            List of validated FieldReport objects

        Raises:
            CAICAPIError: If the API fails or returns an unexpected body
        """
        url = build_caic_url(date, self.base_url)
        logger.info("[CAIC] Fetching reports for %s", date)
        logger.debug("[CAIC] API URL: %s", url)

        start = time.time()
        try:
            response = _request_with_retry(url, timeout=self.timeout)
            data = response.json()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error("[CAIC] API error: %s", status_code)
            raise CAICAPIError(f"CAIC API error: {status_code}") from e
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("[CAIC] Request failed: %s", e)
            raise CAICAPIError(f"CAIC API request failed: {e}") from e
        elapsed_ms = (time.time() - start) * 1000

        if not isinstance(data, list):
            raise CAICAPIError("CAIC API returned an unexpected response body")

        reports = parse_reports(data)
        logger.info(
            "[CAIC] Retrieved %d reports in %.0fms", len(reports), elapsed_ms
        )
        return reports
