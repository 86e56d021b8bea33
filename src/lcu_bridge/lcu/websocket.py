"""Push side of the local client adapter.

LcuWebSocket owns one websocket to the client and a background reader
task. Each event frame is decoded and handed synchronously to the handler
registered for its topic. Handlers run on the reader task, so they must
not block; a failing handler is logged and the reader keeps going.

Subscriptions live only as long as this object. When the socket drops,
the reader ends and a new channel (with fresh subscriptions) has to be
opened by the caller.
"""

from __future__ import annotations

__all__ = [
    "LcuWebSocket",
]

import asyncio
import logging
import ssl
from typing import Any

from websockets.asyncio.client import connect as websockets_connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake

from lcu_bridge.constants import APP_NAME, WEBSOCKET_OPEN_TIMEOUT_SECONDS
from lcu_bridge.exceptions import ConnectFailedError

from .interfaces import PushHandler
from .lockfile import LockfileCredentials
from .wamp import PushEvent, decode_event, encode_subscribe

_logger = logging.getLogger(f"{APP_NAME}.lcu.websocket")


def _insecure_ssl_context() -> ssl.SSLContext:
    """SSL context accepting the client's self-signed loopback certificate."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


class LcuWebSocket:
    """Push channel to the local client.

    Usage:
        channel = LcuWebSocket(credentials)
        await channel.start()
        channel.subscribe("OnJsonApiEvent_lol-gameflow_v1_session", handler)
        ...
        await channel.close()
    """

    def __init__(
        self,
        credentials: LockfileCredentials,
        *,
        open_timeout: float = WEBSOCKET_OPEN_TIMEOUT_SECONDS,
        connect: Any = None,
    ) -> None:
        """Initialize the channel (does not connect).

        Args:
            credentials: Lockfile credentials of the running client.
            open_timeout: Seconds allowed for the websocket handshake.
            connect: Replacement for websockets' connect(), for tests.
        """
        self._credentials = credentials
        self._open_timeout = open_timeout
        self._connect = connect or websockets_connect
        self._handlers: dict[str, PushHandler] = {}
        self._ws: Any = None
        self._reader_task: asyncio.Task[None] | None = None
        self._send_tasks: set[asyncio.Task[None]] = set()
        self._delivered = 0

    @property
    def connected(self) -> bool:
        """Whether the socket is open and the reader is running."""
        return self._ws is not None and self._reader_task is not None and not self._reader_task.done()

    @property
    def topics(self) -> list[str]:
        """Currently subscribed topics."""
        return list(self._handlers)

    @property
    def delivered_count(self) -> int:
        """Number of events handed to handlers so far."""
        return self._delivered

    async def start(self) -> None:
        """Open the websocket, send pending subscriptions, start the reader.

        Raises:
            ConnectFailedError: If the handshake fails or times out.
        """
        try:
            self._ws = await self._connect(
                self._credentials.websocket_url,
                additional_headers={"Authorization": self._credentials.auth_header},
                ssl=_insecure_ssl_context(),
                open_timeout=self._open_timeout,
            )
        except (OSError, InvalidHandshake, asyncio.TimeoutError) as e:
            raise ConnectFailedError(f"Cannot open push channel on port {self._credentials.port}: {e}") from e

        for topic in self._handlers:
            await self._ws.send(encode_subscribe(topic))

        self._reader_task = asyncio.create_task(self._read_loop())

    def subscribe(self, topic: str, handler: PushHandler) -> None:
        """Register the handler for a topic.

        A later subscribe() for the same topic replaces the handler. If the
        socket is already open the subscribe frame is sent right away,
        otherwise it is sent by start().
        """
        already_subscribed = topic in self._handlers
        self._handlers[topic] = handler

        if self._ws is not None and not already_subscribed:
            task = asyncio.get_running_loop().create_task(self._send_subscribe(topic))
            self._send_tasks.add(task)
            task.add_done_callback(self._send_tasks.discard)

    async def close(self) -> None:
        """Stop the reader and close the socket. Safe to call twice."""
        for task in list(self._send_tasks):
            task.cancel()
        self._send_tasks.clear()

        if self._reader_task is not None:
            self._reader_task.cancel()
            try:
                await self._reader_task
            except asyncio.CancelledError:
                pass
            self._reader_task = None

        if self._ws is not None:
            try:
                await self._ws.close()
            except (OSError, ConnectionClosed):
                pass  # Already closed
            self._ws = None

        self._handlers.clear()

    async def _send_subscribe(self, topic: str) -> None:
        try:
            await self._ws.send(encode_subscribe(topic))
        except (OSError, ConnectionClosed) as e:
            _logger.warning(
                {
                    "event": "push_subscribe_failed",
                    "message": f"Failed to subscribe to {topic}: {e}",
                    "topic": topic,
                    "error_type": type(e).__name__,
                }
            )

    async def _read_loop(self) -> None:
        """Read frames until the socket closes or the task is cancelled."""
        try:
            async for raw in self._ws:
                event = decode_event(raw)
                if event is not None:
                    self._dispatch(event)
        except ConnectionClosed as e:
            _logger.warning(
                {
                    "event": "push_channel_closed",
                    "message": f"Push channel closed by League client: {e}",
                    "port": self._credentials.port,
                    "error_type": type(e).__name__,
                }
            )
        except OSError as e:
            _logger.warning(
                {
                    "event": "push_channel_read_error",
                    "message": f"Error reading push channel: {e}",
                    "port": self._credentials.port,
                    "error_type": type(e).__name__,
                }
            )

    def _dispatch(self, event: PushEvent) -> None:
        handler = self._handlers.get(event.topic)
        if handler is None:
            return

        self._delivered += 1
        try:
            handler(event)
        except Exception as e:
            # Handlers are callbacks from other layers; one failure must not end the reader
            _logger.error(
                {
                    "event": "push_handler_failed",
                    "message": f"Handler for {event.topic} raised {type(e).__name__}: {e}",
                    "topic": event.topic,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                }
            )
