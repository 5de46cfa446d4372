"""Lambda handlers for the CAIC Field Report Aggregator API."""

from .api_handler import api_handler

__all__ = ["api_handler"]
