"""Shared fixtures for lcu-bridge tests."""

from __future__ import annotations

import pytest

from fakes import FakeClient

from lcu_bridge.bus import UIEventBus
from lcu_bridge.core import ConnectionSupervisor, EventRelay, RequestProxy, SharedStateStore


@pytest.fixture
def store() -> SharedStateStore:
    """Fresh state store (DISCONNECTED)."""
    return SharedStateStore()


@pytest.fixture
def bus() -> UIEventBus:
    return UIEventBus()


@pytest.fixture
def relay(bus: UIEventBus) -> EventRelay:
    return EventRelay(bus)


@pytest.fixture
def client() -> FakeClient:
    """Fake League client, initially not running."""
    return FakeClient()


@pytest.fixture
def supervisor(
    store: SharedStateStore, client: FakeClient, relay: EventRelay, bus: UIEventBus
) -> ConnectionSupervisor:
    return ConnectionSupervisor(store, client, relay, bus, poll_interval=0.01, request_timeout=1.0)


@pytest.fixture
def proxy(store: SharedStateStore) -> RequestProxy:
    return RequestProxy(store, timeout=1.0)
