"""Utility functions for the CAIC Field Report Aggregator."""

from .cache import ResponseCache, hash_payload

__all__ = ["ResponseCache", "hash_payload"]
