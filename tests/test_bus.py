"""Tests for UIEventBus."""

from __future__ import annotations

from datetime import datetime

import pytest

from fakes import drain

from lcu_bridge.bus import BUS_CLOSED, UIEventBus
from lcu_bridge.exceptions import EventEmitError


class TestUIEventBus:
    """Tests for fan-out, back-pressure and close."""

    async def test_emit_reaches_every_subscriber(self) -> None:
        bus = UIEventBus()
        first, second = bus.subscribe(), bus.subscribe()

        bus.emit("gameflow", {"phase": "Lobby"})

        for queue in (first, second):
            (event,) = drain(queue)
            assert event["type"] == "gameflow"
            assert event["payload"] == {"phase": "Lobby"}
            assert datetime.fromisoformat(event["timestamp"]).tzinfo is not None

    async def test_unsubscribe_stops_delivery(self) -> None:
        bus = UIEventBus()
        queue = bus.subscribe()
        bus.unsubscribe(queue)
        bus.unsubscribe(queue)  # unknown queues are ignored

        bus.emit("connection", True)

        assert drain(queue) == []
        assert bus.subscriber_count == 0

    async def test_full_queue_drops_for_that_subscriber_only(self) -> None:
        bus = UIEventBus(queue_maxsize=1)
        slow, fast = bus.subscribe(), bus.subscribe()

        bus.emit("connection", True)
        drain(fast)
        bus.emit("connection", False)

        assert [e["payload"] for e in drain(slow)] == [True]
        assert [e["payload"] for e in drain(fast)] == [False]

    def test_emit_after_close_raises(self) -> None:
        bus = UIEventBus()
        bus.subscribe()
        bus.close()

        assert bus.closed is True
        assert bus.subscriber_count == 0
        with pytest.raises(EventEmitError):
            bus.emit("connection", True)

    async def test_close_wakes_subscribers_even_when_full(self) -> None:
        bus = UIEventBus(queue_maxsize=1)
        idle = bus.subscribe()
        full = bus.subscribe()
        bus.emit("connection", True)
        idle.get_nowait()

        bus.close()

        assert idle.get_nowait() is BUS_CLOSED
        assert full.get_nowait() is BUS_CLOSED
        assert full.empty()
