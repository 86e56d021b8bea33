"""Shared connection state.

SharedStateStore is the single mutable record of the current session:
(session handle, push-channel handle, connection state). It is guarded by
one asyncio.Lock, so a supervisor tick and a proxied request never observe
or change it at the same time.

The triple is only reachable through a StateView handed out by access().
attach() and detach() change the handles and the state together, so the
two valid combinations are the only observable ones:
    CONNECTED     <=> session and channel both present
    DISCONNECTED  <=> session and channel both absent
"""

from __future__ import annotations

__all__ = [
    "ConnectionState",
    "SharedStateStore",
    "StateSnapshot",
    "StateView",
]

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lcu_bridge.lcu.interfaces import PushChannel, SessionHandle


class ConnectionState(str, Enum):
    """Connection state of the bridge to the local client."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


@dataclass(frozen=True)
class StateSnapshot:
    """Point-in-time copy of the store, for diagnostics and tests."""

    state: ConnectionState
    has_session: bool
    has_channel: bool


class StateView:
    """Exclusive access to the store, valid only inside access()."""

    def __init__(self, store: SharedStateStore) -> None:
        self._store = store
        self._active = True

    def _check(self) -> SharedStateStore:
        if not self._active:
            raise RuntimeError("StateView used outside of SharedStateStore.access()")
        return self._store

    @property
    def state(self) -> ConnectionState:
        return self._check()._state

    @property
    def connected(self) -> bool:
        return self._check()._state is ConnectionState.CONNECTED

    @property
    def session(self) -> "SessionHandle | None":
        return self._check()._session

    @property
    def channel(self) -> "PushChannel | None":
        return self._check()._channel

    def attach(self, session: "SessionHandle", channel: "PushChannel") -> None:
        """Store fresh handles and switch to CONNECTED.

        Raises:
            ValueError: If either handle is None.
            RuntimeError: If handles are already attached.
        """
        store = self._check()
        if session is None or channel is None:
            raise ValueError("attach() requires both a session and a push channel")
        if store._state is ConnectionState.CONNECTED:
            raise RuntimeError("attach() called while already connected")

        store._session = session
        store._channel = channel
        store._state = ConnectionState.CONNECTED

    def detach(self) -> tuple["SessionHandle | None", "PushChannel | None"]:
        """Drop both handles and switch to DISCONNECTED.

        Returns:
            The previous (session, channel) so the caller can release them.
        """
        store = self._check()
        old = (store._session, store._channel)
        store._session = None
        store._channel = None
        store._state = ConnectionState.DISCONNECTED
        return old

    def _release(self) -> None:
        self._active = False


class SharedStateStore:
    """Lock-guarded (session, channel, state) triple.

    Created once at startup in DISCONNECTED state and lives for the
    process lifetime.

    Usage:
        async with store.access() as view:
            if view.connected:
                await view.session.get("/lol-gameflow/v1/session")
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._session: SessionHandle | None = None
        self._channel: PushChannel | None = None
        self._state = ConnectionState.DISCONNECTED

    @property
    def locked(self) -> bool:
        """Whether some actor currently holds exclusive access."""
        return self._lock.locked()

    @asynccontextmanager
    async def access(self) -> AsyncIterator[StateView]:
        """Acquire exclusive access for the duration of the block."""
        async with self._lock:
            view = StateView(self)
            try:
                yield view
            finally:
                view._release()

    async def is_connected(self) -> bool:
        """Return whether a session currently exists."""
        async with self.access() as view:
            return view.connected

    async def snapshot(self) -> StateSnapshot:
        """Return a consistent copy of the current triple."""
        async with self.access() as view:
            return StateSnapshot(
                state=view.state,
                has_session=view.session is not None,
                has_channel=view.channel is not None,
            )
