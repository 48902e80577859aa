"""
SSE-based EventBus implementation.

Each connected client owns a bounded queue. A client that stops reading
loses its oldest events instead of stalling the tool calls that publish
permission requests.
"""

import asyncio
import logging
from typing import Any

from core import Event

logger = logging.getLogger(__name__)

# Events buffered per subscriber before the oldest are dropped
MAX_QUEUED_EVENTS = 1000


class SSEEventBus:
    """EventBus that fans events out to per-subscriber queues."""

    def __init__(self, max_queued: int = MAX_QUEUED_EVENTS) -> None:
        self.max_queued = max_queued
        self.subscribers: list[asyncio.Queue[dict[str, Any]]] = []

    async def publish(self, event: Event) -> None:
        """Deliver an event to every subscriber without waiting on any of them."""
        data = event.model_dump(mode="json")
        for queue in list(self.subscribers):
            if queue.full():
                queue.get_nowait()
                logger.warning("Subscriber queue full, dropped oldest event before %s", event.type)
            queue.put_nowait(data)

    def subscribe(self) -> asyncio.Queue[dict[str, Any]]:
        """Register a new subscriber and return its queue."""
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self.max_queued)
        self.subscribers.append(queue)
        logger.debug("Event subscriber added (%d total)", len(self.subscribers))
        return queue

    def unsubscribe(self, queue: asyncio.Queue[dict[str, Any]]) -> None:
        if queue in self.subscribers:
            self.subscribers.remove(queue)
            logger.debug("Event subscriber removed (%d left)", len(self.subscribers))


# Global event bus instance
_event_bus: SSEEventBus | None = None


def get_event_bus() -> SSEEventBus:
    """Get the global event bus instance, creating it if necessary."""
    global _event_bus
    if _event_bus is None:
        _event_bus = SSEEventBus()
    return _event_bus
