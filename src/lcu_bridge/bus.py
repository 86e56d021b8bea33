"""UI event bus.

The boundary between the bridge and the UI: components publish named
events here, and each UI subscriber (an SSE stream) drains its own queue.

Emission is synchronous and never blocks: it is called from the push
channel's delivery path and from inside the supervisor's critical section.
"""

from __future__ import annotations

__all__ = [
    "BUS_CLOSED",
    "UIEventBus",
]

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from lcu_bridge.constants import APP_NAME, SSE_QUEUE_MAXSIZE
from lcu_bridge.exceptions import EventEmitError

_logger = logging.getLogger(f"{APP_NAME}.bus")

# Last item close() puts on every subscriber queue. Compared by identity.
BUS_CLOSED: dict[str, Any] = {"type": "bus_closed"}


class UIEventBus:
    """Fan-out of UI events to per-subscriber queues.

    Each event is a dict: {"type": name, "payload": ..., "timestamp": iso8601}.
    A full subscriber queue drops the event for that subscriber only.
    After close(), emit() raises EventEmitError.
    """

    def __init__(self, queue_maxsize: int = SSE_QUEUE_MAXSIZE) -> None:
        self._queue_maxsize = queue_maxsize
        self._subscribers: list[asyncio.Queue[dict[str, Any]]] = []
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        """Return the current number of subscribers."""
        return len(self._subscribers)

    @property
    def closed(self) -> bool:
        """Whether the bus has been closed."""
        return self._closed

    def subscribe(self) -> asyncio.Queue[dict[str, Any]]:
        """Subscribe to all events emitted from now on.

        Returns:
            Queue that will receive all events.
        """
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[dict[str, Any]]) -> None:
        """Remove a subscriber queue. Unknown queues are ignored."""
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def emit(self, event_name: str, payload: Any) -> None:
        """Publish an event to every subscriber.

        Args:
            event_name: Event name (see UIEventType).
            payload: JSON-serializable payload, forwarded unchanged.

        Raises:
            EventEmitError: If the bus is closed.
        """
        if self._closed:
            raise EventEmitError(f"UI event bus is closed, cannot emit '{event_name}'")

        event = {
            "type": event_name,
            "payload": payload,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                _logger.warning(
                    {
                        "event": "ui_queue_full",
                        "message": f"UI subscriber queue full, dropping '{event_name}' event",
                        "subscriber_count": len(self._subscribers),
                    }
                )

    def close(self) -> None:
        """Close the bus. Subsequent emits fail with EventEmitError.

        Every subscriber receives BUS_CLOSED as its last item, so streams
        blocked on their queue end right away.
        """
        self._closed = True
        for queue in self._subscribers:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(BUS_CLOSED)
        self._subscribers.clear()
