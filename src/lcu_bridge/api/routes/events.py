"""SSE events endpoint.

Streams UI bus events to the UI as `data: {"type": ..., "payload": ..., "timestamp": ...}`.
No named SSE events are used; the UI routes on data.type in its onmessage
handler.
"""

from __future__ import annotations

__all__ = ["event_stream", "router"]

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from lcu_bridge.bus import BUS_CLOSED, UIEventBus
from lcu_bridge.constants import APP_NAME
from lcu_bridge.core.proxy import RequestProxy
from lcu_bridge.events import UIEventType

from ..deps import BusDep, ProxyDep, SettingsDep

_logger = logging.getLogger(f"{APP_NAME}.api.events")

router = APIRouter(tags=["events"])


async def event_stream(
    bus: UIEventBus,
    proxy: RequestProxy,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive_seconds: float,
) -> AsyncIterator[dict[str, Any]]:
    """Yield SSE messages for one subscriber.

    The first message is a "connection" snapshot so a UI that opens the
    stream late still learns the current state. Afterwards every bus event
    is forwarded; a comment is sent when nothing arrived for
    keepalive_seconds. The stream ends when the bus is closed.
    """
    # Subscribe before the snapshot so no transition falls in between
    queue = bus.subscribe()
    subscriber_count = bus.subscriber_count
    _logger.info(
        {
            "event": "sse_subscriber_connected",
            "message": f"SSE subscriber connected (total: {subscriber_count})",
            "subscriber_count": subscriber_count,
        }
    )
    try:
        snapshot = {
            "type": UIEventType.CONNECTION.value,
            "payload": await proxy.is_connected(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        yield {"data": json.dumps(snapshot)}

        while not bus.closed:
            if await is_disconnected():
                break
            try:
                event = await asyncio.wait_for(queue.get(), timeout=keepalive_seconds)
            except asyncio.TimeoutError:
                # SSE comment, does not trigger onmessage
                yield {"comment": "keepalive"}
                continue
            if event is BUS_CLOSED:
                break
            yield {"data": json.dumps(event, default=str)}
    finally:
        bus.unsubscribe(queue)
        subscriber_count = bus.subscriber_count
        _logger.info(
            {
                "event": "sse_subscriber_disconnected",
                "message": f"SSE subscriber disconnected (total: {subscriber_count})",
                "subscriber_count": subscriber_count,
            }
        )


@router.get("/api/events")
async def sse_events(request: Request, bus: BusDep, proxy: ProxyDep, settings: SettingsDep) -> EventSourceResponse:
    """SSE endpoint for connection, champ-select and gameflow events."""
    return EventSourceResponse(
        event_stream(bus, proxy, request.is_disconnected, settings.sse_keepalive_seconds)
    )
