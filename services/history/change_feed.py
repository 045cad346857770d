"""In-process change notifications for the scan history table."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Set

from models.history_record import HistoryChange

LOGGER = logging.getLogger(__name__)


class HistoryChangeFeed:
    """Fan history mutations out to every subscriber.

    Each subscriber gets its own bounded queue. When a subscriber falls
    behind, the oldest pending event is dropped; subscribers only use events
    as a cue to re-fetch history, so a lost event is recovered by the next.
    """

    def __init__(self, max_pending: int = 100) -> None:
        self.max_pending = max_pending
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, change: HistoryChange) -> None:
        """Queue `change` for every current subscriber without blocking."""
        for queue in list(self._subscribers):
            if queue.full():
                queue.get_nowait()
                LOGGER.warning("History subscriber lagging; dropped oldest change event")
            queue.put_nowait(change)

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator["asyncio.Queue[HistoryChange]"]:
        """Register a subscriber queue for the lifetime of the context."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_pending)
        self._subscribers.add(queue)
        try:
            yield queue
        finally:
            self._subscribers.discard(queue)
