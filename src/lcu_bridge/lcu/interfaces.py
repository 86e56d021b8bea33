"""Interfaces of the local client collaborator.

The core (state store, supervisor, relay, proxy) depends only on these
protocols. LcuConnector/LcuSession/LcuWebSocket implement them against
the real client; tests substitute in-memory fakes.
"""

from __future__ import annotations

__all__ = [
    "LocalServiceClient",
    "PushChannel",
    "PushHandler",
    "SessionHandle",
]

from collections.abc import Callable
from typing import Any, Protocol

from .wamp import PushEvent

PushHandler = Callable[[PushEvent], None]


class SessionHandle(Protocol):
    """An authenticated connection to the local client's REST API."""

    async def get(self, path: str) -> Any: ...

    async def post(self, path: str, body: Any) -> Any: ...

    async def put(self, path: str, body: Any) -> Any: ...

    async def aclose(self) -> None: ...


class PushChannel(Protocol):
    """Topic subscriptions on the local client's push channel."""

    def subscribe(self, topic: str, handler: PushHandler) -> None: ...

    async def close(self) -> None: ...


class LocalServiceClient(Protocol):
    """Discovers and authenticates to the local client.

    connect() raises ConnectFailedError when the client is not running or
    its credentials cannot be read.
    """

    async def connect(self) -> SessionHandle: ...

    async def open_push_channel(
        self,
        session: SessionHandle,
        prepare: Callable[[PushChannel], object] | None = None,
    ) -> PushChannel:
        """Open the push channel. prepare(channel) runs before it connects."""
