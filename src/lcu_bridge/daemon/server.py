"""Bridge process orchestrator (run_bridge entry point).

Wires the state store, event bus, relay, connector, supervisor and proxy,
then runs the supervisor loop next to the HTTP server until a shutdown
signal arrives.
"""

from __future__ import annotations

__all__ = [
    "BridgeComponents",
    "build_components",
    "run_bridge",
]

import asyncio
import logging
import os
import signal
from dataclasses import dataclass

import uvicorn
from fastapi import FastAPI

from lcu_bridge.api import create_bridge_api_app
from lcu_bridge.bus import UIEventBus
from lcu_bridge.config import BridgeConfig, load_config_strict
from lcu_bridge.constants import API_SERVER_SHUTDOWN_TIMEOUT_SECONDS, BRIDGE_HOST
from lcu_bridge.core import ConnectionSupervisor, EventRelay, RequestProxy, SharedStateStore
from lcu_bridge.lcu import LcuConnector, LocalServiceClient
from lcu_bridge.models import SystemEvent

from .lifecycle import bind_listen_socket, is_port_in_use, port_in_use_message
from .log_config import configure_logging, log_event


@dataclass
class BridgeComponents:
    """Everything run_bridge() starts and stops."""

    store: SharedStateStore
    bus: UIEventBus
    relay: EventRelay
    supervisor: ConnectionSupervisor
    proxy: RequestProxy
    app: FastAPI


def build_components(
    config: BridgeConfig,
    *,
    poll_interval: float | None = None,
    client: LocalServiceClient | None = None,
) -> BridgeComponents:
    """Create and wire the bridge components.

    Args:
        config: Loaded bridge configuration.
        poll_interval: Overrides config.poll_interval_seconds when given.
        client: Local client collaborator. Defaults to an LcuConnector
            built from config.
    """
    store = SharedStateStore()
    bus = UIEventBus()
    relay = EventRelay(bus)

    if client is None:
        client = LcuConnector(
            lockfile_path=config.lockfile_path,
            timeout=config.request_timeout_seconds,
            probe_path=config.liveness_path,
        )

    supervisor = ConnectionSupervisor(
        store,
        client,
        relay,
        bus,
        poll_interval=poll_interval if poll_interval is not None else config.poll_interval_seconds,
        liveness_path=config.liveness_path,
        request_timeout=config.request_timeout_seconds,
    )
    proxy = RequestProxy(store, timeout=config.request_timeout_seconds)
    app = create_bridge_api_app(proxy, bus, fetch_timeout=config.request_timeout_seconds)

    return BridgeComponents(
        store=store,
        bus=bus,
        relay=relay,
        supervisor=supervisor,
        proxy=proxy,
        app=app,
    )


async def run_bridge(port: int | None = None, poll_interval: float | None = None) -> None:
    """Run the bridge until SIGINT/SIGTERM.

    Args:
        port: HTTP port for the UI. If None, uses config.ui_port.
        poll_interval: Supervisor tick interval. If None, uses config.

    Raises:
        ConfigurationError: If the config file is invalid.
        RuntimeError: If the port is in use.
    """
    # Strict: a broken config file is reported, not silently replaced
    config = load_config_strict()

    configure_logging(config)

    effective_port = port if port is not None else config.ui_port

    # Suppress uvicorn's logging (we use our own)
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(logging.CRITICAL)

    if is_port_in_use(effective_port):
        raise RuntimeError(port_in_use_message(effective_port))

    components = build_components(config, poll_interval=poll_interval)

    log_event(
        logging.INFO,
        SystemEvent(
            event="bridge_starting",
            message=f"Bridge starting: port={effective_port}, pid={os.getpid()}",
            port=effective_port,
            details={
                "pid": os.getpid(),
                "poll_interval_seconds": components.supervisor.poll_interval,
                "liveness_path": config.liveness_path,
            },
        ),
    )

    shutdown_event = asyncio.Event()

    def signal_handler(signum: int, frame: object) -> None:
        """Handle shutdown signals (SIGTERM, SIGINT)."""
        log_event(
            logging.INFO,
            SystemEvent(
                event="shutdown_signal_received",
                message=f"Received signal {signum}, initiating shutdown",
                details={"signal": signum},
            ),
        )
        shutdown_event.set()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    http_socket = bind_listen_socket(effective_port)
    http_config = uvicorn.Config(
        components.app,
        fd=http_socket.fileno(),
        log_config=None,
        ws="none",  # SSE only
    )
    http_server = uvicorn.Server(http_config)

    async def run_server() -> None:
        try:
            await http_server._serve()
        except asyncio.CancelledError:
            pass

    server_task = asyncio.create_task(run_server())
    supervisor_task = asyncio.create_task(components.supervisor.run())

    log_event(
        logging.INFO,
        SystemEvent(
            event="bridge_started",
            message=f"Bridge listening on http://{BRIDGE_HOST}:{effective_port}",
            port=effective_port,
        ),
    )

    try:
        await shutdown_event.wait()
    finally:
        log_event(
            logging.INFO,
            SystemEvent(
                event="bridge_shutting_down",
                message="Bridge shutting down",
            ),
        )

        supervisor_task.cancel()
        try:
            await supervisor_task
        except asyncio.CancelledError:
            pass

        # Ends open SSE streams; later emits fail with EventEmitError
        components.bus.close()
        await components.supervisor.close()

        http_server.should_exit = True
        try:
            await asyncio.wait_for(server_task, timeout=API_SERVER_SHUTDOWN_TIMEOUT_SECONDS)
        except asyncio.TimeoutError:
            log_event(
                logging.WARNING,
                SystemEvent(
                    event="shutdown_timeout",
                    message="Server shutdown timed out, cancelling",
                ),
            )
            server_task.cancel()
        except asyncio.CancelledError:
            pass

        try:
            http_socket.close()
        except OSError:
            pass  # Non-critical cleanup

        log_event(
            logging.INFO,
            SystemEvent(
                event="bridge_stopped",
                message="Bridge shutdown complete",
            ),
        )
