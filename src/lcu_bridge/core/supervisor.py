"""Connection supervisor.

A periodic control loop over SharedStateStore. One rule per tick, applied
while holding exclusive access:

- DISCONNECTED: try to connect. On success open the push channel with the
  relay's subscriptions registered before its handshake, attach both
  handles, emit connection=True.
  On failure stay DISCONNECTED; the next tick retries (fixed interval,
  no backoff).
- CONNECTED: issue one liveness read. On success nothing happens. On
  failure detach and release both handles, then emit connection=False.

The connection event is emitted only after the store reflects the new
state, and only on transitions.
"""

from __future__ import annotations

__all__ = [
    "ConnectionSupervisor",
]

import asyncio
import logging
import traceback
from typing import TYPE_CHECKING

from lcu_bridge.constants import (
    APP_NAME,
    DEFAULT_LIVENESS_PATH,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from lcu_bridge.events import UIEventType
from lcu_bridge.exceptions import (
    ConnectFailedError,
    EventEmitError,
    LivenessLostError,
    RequestFailedError,
)

from .state import ConnectionState, SharedStateStore, StateView

if TYPE_CHECKING:
    from lcu_bridge.bus import UIEventBus
    from lcu_bridge.lcu.interfaces import LocalServiceClient, PushChannel, SessionHandle

    from .relay import EventRelay

_logger = logging.getLogger(f"{APP_NAME}.supervisor")


class ConnectionSupervisor:
    """Drives the DISCONNECTED/CONNECTED state machine.

    Args:
        store: Shared state store (owned by the caller, lives for the process).
        client: Local client collaborator used to create handles.
        relay: Event relay whose subscriptions are registered on each new channel.
        bus: UI event bus receiving "connection" events.
        poll_interval: Seconds to sleep between ticks.
        liveness_path: Client API path read by the liveness check.
        request_timeout: Upper bound for connect and liveness calls.
    """

    def __init__(
        self,
        store: SharedStateStore,
        client: "LocalServiceClient",
        relay: "EventRelay",
        bus: "UIEventBus",
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        liveness_path: str = DEFAULT_LIVENESS_PATH,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._store = store
        self._client = client
        self._relay = relay
        self._bus = bus
        self._poll_interval = poll_interval
        self._liveness_path = liveness_path
        self._request_timeout = request_timeout

        self._connect_count = 0
        self._loss_count = 0
        # Last connect failure reason, so a client that stays closed logs once
        self._last_connect_error: str | None = None

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def connect_count(self) -> int:
        """Number of DISCONNECTED -> CONNECTED transitions so far."""
        return self._connect_count

    @property
    def loss_count(self) -> int:
        """Number of CONNECTED -> DISCONNECTED transitions so far."""
        return self._loss_count

    async def run(self) -> None:
        """Tick forever. Ends only when the task is cancelled.

        A tick that raises is logged and the loop carries on.
        """
        _logger.info(
            {
                "event": "supervisor_started",
                "message": f"Connection supervisor started (interval {self._poll_interval}s)",
                "poll_interval_seconds": self._poll_interval,
            }
        )
        while True:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise  # Normal shutdown
            except Exception as e:
                _logger.error(
                    {
                        "event": "supervisor_tick_failed",
                        "message": f"Supervisor tick failed: {type(e).__name__}: {e}",
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                        "traceback": traceback.format_exc(),
                    }
                )
            await asyncio.sleep(self._poll_interval)

    async def tick(self) -> ConnectionState:
        """Apply one transition rule.

        Returns:
            The state after the tick.
        """
        async with self._store.access() as view:
            if view.connected:
                await self._check_liveness(view)
            else:
                await self._try_connect(view)
            return view.state

    async def close(self) -> None:
        """Release any live handles at process shutdown.

        Call after the run() task has been cancelled. No event is emitted.
        """
        async with self._store.access() as view:
            if not view.connected:
                return
            session, channel = view.detach()
        await self._release(session, channel)
        _logger.info(
            {
                "event": "lcu_session_released",
                "message": "Released League client session",
                "state": ConnectionState.DISCONNECTED.value,
            }
        )

    # =========================================================================
    # Transitions
    # =========================================================================

    async def _try_connect(self, view: StateView) -> None:
        try:
            session = await asyncio.wait_for(self._client.connect(), timeout=self._request_timeout)
        except ConnectFailedError as e:
            self._log_connect_failure(str(e))
            return
        except asyncio.TimeoutError:
            self._log_connect_failure(f"Connecting to League client timed out after {self._request_timeout}s")
            return

        try:
            channel = await asyncio.wait_for(
                self._client.open_push_channel(session, self._relay.attach),
                timeout=self._request_timeout,
            )
        except (ConnectFailedError, asyncio.TimeoutError) as e:
            # Handles change together: without a channel the session is dropped too
            await self._release(session, None)
            self._log_connect_failure(f"Push channel unavailable: {e or type(e).__name__}")
            return
        except BaseException:
            await self._release(session, None)
            raise

        count = len(self._relay.subscriptions)
        view.attach(session, channel)
        self._connect_count += 1
        self._last_connect_error = None

        _logger.info(
            {
                "event": "lcu_connected",
                "message": "Successfully connected to League client",
                "state": view.state.value,
                "subscriptions": count,
            }
        )
        self._emit_connectivity(True)

    async def _check_liveness(self, view: StateView) -> None:
        session = view.session
        assert session is not None  # CONNECTED implies a session

        try:
            await asyncio.wait_for(session.get(self._liveness_path), timeout=self._request_timeout)
            return
        except RequestFailedError as e:
            lost = LivenessLostError(str(e))
        except asyncio.TimeoutError:
            lost = LivenessLostError(f"Liveness check timed out after {self._request_timeout}s")

        old_session, old_channel = view.detach()
        await self._release(old_session, old_channel)
        self._loss_count += 1

        _logger.warning(
            {
                "event": "lcu_connection_lost",
                "message": "Lost connection to League client",
                "state": view.state.value,
                "path": self._liveness_path,
                "error_type": type(lost).__name__,
                "error_message": lost.message,
            }
        )
        self._emit_connectivity(False)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _release(self, session: "SessionHandle | None", channel: "PushChannel | None") -> None:
        """Close discarded handles. Close errors are logged, never raised."""
        if channel is not None:
            try:
                await channel.close()
            except (OSError, RuntimeError) as e:
                _logger.warning(
                    {
                        "event": "push_channel_close_failed",
                        "message": f"Failed to close push channel: {e}",
                        "error_type": type(e).__name__,
                    }
                )
        if session is not None:
            try:
                await session.aclose()
            except (OSError, RuntimeError) as e:
                _logger.warning(
                    {
                        "event": "session_close_failed",
                        "message": f"Failed to close session: {e}",
                        "error_type": type(e).__name__,
                    }
                )

    def _emit_connectivity(self, connected: bool) -> None:
        try:
            self._bus.emit(UIEventType.CONNECTION.value, connected)
        except EventEmitError as e:
            _logger.warning(
                {
                    "event": "ui_emit_failed",
                    "message": f"Failed to notify UI of connection={connected}: {e}",
                    "error_type": type(e).__name__,
                }
            )

    def _log_connect_failure(self, reason: str) -> None:
        level = logging.DEBUG if reason == self._last_connect_error else logging.INFO
        self._last_connect_error = reason
        _logger.log(
            level,
            {
                "event": "lcu_connect_failed",
                "message": reason,
                "state": ConnectionState.DISCONNECTED.value,
            },
        )
