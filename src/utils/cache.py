"""Caching utilities for LLM responses."""

import hashlib
import json
import time
from typing import Any

from cachetools import TTLCache

CACHE_TTL_SECONDS = 86400  # 24 hours; summaries for a past date don't change
CACHE_MAX_ENTRIES = 1024


def hash_payload(payload: Any) -> str:
    """Return the SHA-256 hex digest of a JSON-serializable payload."""
    key_data = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(key_data.encode()).hexdigest()


class ResponseCache:
    """TTL cache of generated text keyed by a hash of the request payload.

    Instances are owned by the service that uses them.
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        maxsize: int = CACHE_MAX_ENTRIES,
        timer=time.monotonic,
    ):
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)

    @staticmethod
    def hash_payload(payload: Any) -> str:
        return hash_payload(payload)

    def get(self, key: str) -> str | None:
        """Return the cached response, or None if missing or expired."""
        return self._cache.get(key)

    def set(self, key: str, response: str) -> None:
        self._cache[key] = response

    def clear(self) -> None:
        self._cache.clear()

    def size(self) -> int:
        """Number of live (unexpired) entries."""
        self._cache.expire()
        return len(self._cache)
