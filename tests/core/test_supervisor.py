"""Tests for ConnectionSupervisor.

Scenarios drive tick() by hand against FakeClient; the property test at
the end checks the state invariants over arbitrary tick sequences.
"""

from __future__ import annotations

import asyncio
import logging

import pytest
from hypothesis import given, settings, strategies as st

from fakes import FakeClient, drain

from lcu_bridge.bus import UIEventBus
from lcu_bridge.core import ConnectionState, ConnectionSupervisor, EventRelay, RequestProxy, SharedStateStore
from lcu_bridge.core.relay import DEFAULT_SUBSCRIPTIONS
from lcu_bridge.exceptions import NotConnectedError


class TestConnect:
    """Tests for the DISCONNECTED rule."""

    async def test_unreachable_client_stays_disconnected(
        self, supervisor: ConnectionSupervisor, client: FakeClient, bus: UIEventBus, store: SharedStateStore
    ) -> None:
        """Failed connect leaves state DISCONNECTED and emits nothing."""
        queue = bus.subscribe()

        state = await supervisor.tick()

        assert state is ConnectionState.DISCONNECTED
        assert client.connect_attempts == 1
        assert drain(queue) == []
        assert await store.is_connected() is False

    async def test_reachable_client_connects_and_emits_once(
        self, supervisor: ConnectionSupervisor, client: FakeClient, bus: UIEventBus, store: SharedStateStore
    ) -> None:
        """Service unreachable, then reachable: one connection=True event."""
        queue = bus.subscribe()
        await supervisor.tick()

        client.reachable = True
        state = await supervisor.tick()

        assert state is ConnectionState.CONNECTED
        events = drain(queue)
        assert [(e["type"], e["payload"]) for e in events] == [("connection", True)]
        assert await store.is_connected() is True
        assert supervisor.connect_count == 1

    async def test_subscriptions_registered_on_new_channel(
        self, supervisor: ConnectionSupervisor, client: FakeClient
    ) -> None:
        """Every fixed subscription is registered on the fresh channel before it starts."""
        client.reachable = True

        await supervisor.tick()

        channel = client.channels[0]
        assert sorted(channel.subscribed) == sorted(sub.topic for sub in DEFAULT_SUBSCRIPTIONS)
        assert channel.subscribed_after_start == []

    async def test_steady_state_is_silent(
        self, supervisor: ConnectionSupervisor, client: FakeClient, bus: UIEventBus
    ) -> None:
        """Successful liveness checks emit nothing and keep the same session."""
        client.reachable = True
        await supervisor.tick()
        queue = bus.subscribe()

        await supervisor.tick()
        await supervisor.tick()

        assert drain(queue) == []
        assert len(client.sessions) == 1
        assert [call[1] for call in client.sessions[0].calls] == [
            "/lol-summoner/v1/current-summoner",
            "/lol-summoner/v1/current-summoner",
        ]

    async def test_channel_failure_drops_session(
        self, supervisor: ConnectionSupervisor, client: FakeClient, bus: UIEventBus, store: SharedStateStore
    ) -> None:
        """If the push channel cannot be opened the new session is closed too."""
        client.reachable = True
        client.channel_fails = True
        queue = bus.subscribe()

        state = await supervisor.tick()

        assert state is ConnectionState.DISCONNECTED
        assert client.sessions[0].closed is True
        assert drain(queue) == []
        snapshot = await store.snapshot()
        assert snapshot.has_session is False
        assert snapshot.has_channel is False

    async def test_repeated_failure_logged_once_at_info(
        self, supervisor: ConnectionSupervisor, caplog: pytest.LogCaptureFixture
    ) -> None:
        """The same connect failure is only logged at INFO the first time."""
        caplog.set_level(logging.DEBUG, logger="lcu-bridge")
        logging.getLogger("lcu-bridge").propagate = True
        try:
            await supervisor.tick()
            await supervisor.tick()
        finally:
            logging.getLogger("lcu-bridge").propagate = False

        levels = [
            r.levelno
            for r in caplog.records
            if isinstance(r.msg, dict) and r.msg.get("event") == "lcu_connect_failed"
        ]
        assert levels == [logging.INFO, logging.DEBUG]


class TestLiveness:
    """Tests for the CONNECTED rule."""

    async def test_liveness_failure_disconnects_and_releases(
        self,
        supervisor: ConnectionSupervisor,
        client: FakeClient,
        bus: UIEventBus,
        proxy: RequestProxy,
    ) -> None:
        """Liveness failure: one connection=False event, handles closed, proxy refuses."""
        client.reachable = True
        await supervisor.tick()
        session, channel = client.sessions[0], client.channels[0]
        queue = bus.subscribe()

        client.drop()
        state = await supervisor.tick()

        assert state is ConnectionState.DISCONNECTED
        assert [(e["type"], e["payload"]) for e in drain(queue)] == [("connection", False)]
        assert session.closed is True
        assert channel.closed is True
        assert supervisor.loss_count == 1
        with pytest.raises(NotConnectedError):
            await proxy.request("GET", "/x")

    async def test_liveness_timeout_counts_as_loss(
        self, store: SharedStateStore, client: FakeClient, relay: EventRelay, bus: UIEventBus
    ) -> None:
        """A liveness read slower than request_timeout is a loss."""
        supervisor = ConnectionSupervisor(store, client, relay, bus, request_timeout=0.05)
        client.reachable = True
        await supervisor.tick()
        client.sessions[0].delay = 1.0

        state = await supervisor.tick()

        assert state is ConnectionState.DISCONNECTED
        assert client.sessions[0].closed is True

    async def test_reconnect_creates_fresh_subscriptions(
        self, supervisor: ConnectionSupervisor, client: FakeClient, bus: UIEventBus
    ) -> None:
        """After a loss the next connect registers subscriptions on a new channel."""
        client.reachable = True
        await supervisor.tick()
        client.drop()
        await supervisor.tick()

        client.reachable = True
        await supervisor.tick()

        assert len(client.channels) == 2
        old, new = client.channels
        assert old.closed is True
        assert old.handlers == {}
        assert len(new.handlers) == len(DEFAULT_SUBSCRIPTIONS)

    async def test_closed_bus_does_not_break_transitions(
        self, supervisor: ConnectionSupervisor, client: FakeClient, bus: UIEventBus, store: SharedStateStore
    ) -> None:
        """Emission failures are absorbed; the state still changes."""
        bus.close()
        client.reachable = True

        state = await supervisor.tick()

        assert state is ConnectionState.CONNECTED
        assert await store.is_connected() is True


class TestRunAndClose:
    """Tests for the loop and shutdown."""

    async def test_run_ticks_until_cancelled(self, supervisor: ConnectionSupervisor, client: FakeClient) -> None:
        """run() keeps ticking at the poll interval until cancelled."""
        task = asyncio.create_task(supervisor.run())
        await asyncio.sleep(0.1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert client.connect_attempts >= 2

    async def test_run_connects_when_client_appears(
        self, supervisor: ConnectionSupervisor, client: FakeClient, store: SharedStateStore
    ) -> None:
        """The loop picks up a client that starts later."""
        task = asyncio.create_task(supervisor.run())
        await asyncio.sleep(0.03)
        client.reachable = True
        for _ in range(50):
            if await store.is_connected():
                break
            await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert await store.is_connected() is True

    async def test_run_survives_unexpected_tick_errors(
        self,
        supervisor: ConnectionSupervisor,
        client: FakeClient,
        store: SharedStateStore,
        caplog: pytest.LogCaptureFixture,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """An unexpected exception is logged with a traceback and the loop keeps ticking."""
        monkeypatch.setattr(logging.getLogger("lcu-bridge"), "propagate", True)
        caplog.set_level(logging.ERROR, logger="lcu-bridge")

        attempts = 0
        connect = client.connect

        async def flaky_connect():
            nonlocal attempts
            attempts += 1
            if attempts <= 2:
                raise OverflowError("connect(): port must be 0-65535.")
            return await connect()

        monkeypatch.setattr(client, "connect", flaky_connect)
        client.reachable = True

        task = asyncio.create_task(supervisor.run())
        for _ in range(100):
            if await store.is_connected():
                break
            await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert attempts >= 3
        assert await store.is_connected() is True
        failures = [
            r.msg for r in caplog.records if isinstance(r.msg, dict) and r.msg.get("event") == "supervisor_tick_failed"
        ]
        assert len(failures) == 2
        assert failures[0]["error_type"] == "OverflowError"
        assert "Traceback" in failures[0]["traceback"]

    async def test_unexpected_channel_error_releases_session(
        self, supervisor: ConnectionSupervisor, client: FakeClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A fresh session is closed when opening its channel raises something unexpected."""

        async def broken_channel(session, prepare=None):
            raise RuntimeError("websocket library bug")

        monkeypatch.setattr(client, "open_push_channel", broken_channel)
        client.reachable = True

        with pytest.raises(RuntimeError):
            await supervisor.tick()

        assert client.sessions[0].closed is True

    async def test_close_releases_handles_without_event(
        self, supervisor: ConnectionSupervisor, client: FakeClient, bus: UIEventBus, store: SharedStateStore
    ) -> None:
        """close() detaches and closes live handles and emits nothing."""
        client.reachable = True
        await supervisor.tick()
        queue = bus.subscribe()

        await supervisor.close()

        assert client.sessions[0].closed is True
        assert client.channels[0].closed is True
        assert await store.is_connected() is False
        assert drain(queue) == []

    async def test_close_when_disconnected_is_noop(self, supervisor: ConnectionSupervisor) -> None:
        """close() without a session does nothing."""
        await supervisor.close()


# =============================================================================
# Property: invariants over arbitrary tick sequences
# =============================================================================

_STEPS = st.lists(
    st.sampled_from(["tick", "up", "down", "channel_fail", "channel_ok"]),
    max_size=40,
)


async def _run_steps(steps: list[str]) -> None:
    store = SharedStateStore()
    bus = UIEventBus()
    client = FakeClient()
    supervisor = ConnectionSupervisor(store, client, EventRelay(bus), bus, poll_interval=0, request_timeout=1.0)
    queue = bus.subscribe()

    for step in steps:
        if step == "tick":
            await supervisor.tick()
        elif step == "up":
            client.reachable = True
        elif step == "down":
            client.drop()
        elif step == "channel_fail":
            client.channel_fails = True
        else:
            client.channel_fails = False

        snapshot = await store.snapshot()
        connected = snapshot.state is ConnectionState.CONNECTED
        # Both handles present iff CONNECTED
        assert snapshot.has_session is connected
        assert snapshot.has_channel is connected
        # At most one live session, and only while CONNECTED
        open_sessions = [s for s in client.sessions if not s.closed]
        assert len(open_sessions) == (1 if connected else 0)
        assert len([c for c in client.channels if not c.closed]) == (1 if connected else 0)

    payloads = [e["payload"] for e in drain(queue)]
    # Events only on transitions: strictly alternating, starting with True
    assert payloads == [i % 2 == 0 for i in range(len(payloads))]
    assert len(payloads) == supervisor.connect_count + supervisor.loss_count
    assert (await store.is_connected()) is (bool(payloads) and payloads[-1])


@settings(max_examples=75, deadline=None)
@given(steps=_STEPS)
def test_state_invariants_hold_for_any_sequence(steps: list[str]) -> None:
    """Handles, state and emitted events stay consistent for any sequence."""
    asyncio.run(_run_steps(steps))
