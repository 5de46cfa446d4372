"""Per-session progress updates delivered as server-sent events."""

import asyncio
import logging
from collections.abc import AsyncIterator

from models.api import ProgressEvent

logger = logging.getLogger(__name__)

# Stages after which a session's stream closes
TERMINAL_STAGES = frozenset({"complete", "error"})


def format_sse(event: ProgressEvent) -> str:
    """Render a progress event as a server-sent-events data frame."""
    return f"data: {event.model_dump_json()}\n\n"


class ProgressTracker:
    """Registry of connected progress listeners keyed by session id."""

    def __init__(self):
        self._clients: dict[str, asyncio.Queue] = {}

    def add_client(self, session_id: str) -> asyncio.Queue:
        """Register a session, replacing any existing listener for it."""
        queue: asyncio.Queue = asyncio.Queue()
        self._clients[session_id] = queue
        return queue

    def remove_client(self, session_id: str) -> None:
        self._clients.pop(session_id, None)

    def has_client(self, session_id: str) -> bool:
        return session_id in self._clients

    def client_count(self) -> int:
        return len(self._clients)

    def send_progress(
        self, session_id: str | None, stage: str, progress: int, message: str
    ) -> None:
        """Queue an update for a session; no-op if nobody is listening."""
        if not session_id:
            return
        queue = self._clients.get(session_id)
        if queue is None:
            return
        queue.put_nowait(ProgressEvent(stage=stage, progress=progress, message=message))

    def stream(self, session_id: str) -> AsyncIterator[str]:
        """Register a session and return its stream of SSE frames.

        The stream ends after a terminal stage and unregisters the session
        when it finishes or the client disconnects.
        """
        queue = self.add_client(session_id)
        logger.info("Progress client connected: %s", session_id)
        return self._drain(session_id, queue)

    async def _drain(self, session_id: str, queue: asyncio.Queue) -> AsyncIterator[str]:
        try:
            while True:
                event: ProgressEvent = await queue.get()
                yield format_sse(event)
                if event.stage in TERMINAL_STAGES:
                    break
        finally:
            # A reconnect may have replaced our queue; leave the new one alone
            if self._clients.get(session_id) is queue:
                self.remove_client(session_id)
            logger.info("Progress client disconnected: %s", session_id)
