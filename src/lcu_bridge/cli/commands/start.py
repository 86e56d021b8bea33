"""Start command for lcu-bridge CLI.

Runs the bridge in the foreground until Ctrl+C.
"""

from __future__ import annotations

__all__ = ["start"]

import asyncio
import sys

import click

from lcu_bridge.config import load_config
from lcu_bridge.constants import BRIDGE_HOST, MAX_POLL_INTERVAL_SECONDS, MIN_POLL_INTERVAL_SECONDS
from lcu_bridge.daemon import run_bridge
from lcu_bridge.exceptions import ConfigurationError

from ..styling import style_error, style_label


@click.command()
@click.option(
    "--port",
    "-p",
    type=click.IntRange(1024, 65535),
    default=None,
    help="HTTP port for the UI (default: config value)",
)
@click.option(
    "--poll-interval",
    type=click.FloatRange(MIN_POLL_INTERVAL_SECONDS, MAX_POLL_INTERVAL_SECONDS),
    default=None,
    help="Seconds between connection checks (default: config value)",
)
def start(port: int | None, poll_interval: float | None) -> None:
    """Start the bridge in the foreground.

    The bridge waits for the League client, keeps the connection alive and
    serves the UI on loopback. Press Ctrl+C to stop.
    """
    config = load_config()
    effective_port = port if port is not None else config.ui_port
    effective_interval = poll_interval if poll_interval is not None else config.poll_interval_seconds

    click.echo(style_label("Starting bridge"))
    click.echo(f"  UI: http://{BRIDGE_HOST}:{effective_port}")
    click.echo(f"  Poll interval: {effective_interval}s")
    click.echo()
    click.echo("Press Ctrl+C to stop")
    click.echo()

    try:
        asyncio.run(run_bridge(port=effective_port, poll_interval=poll_interval))
    except KeyboardInterrupt:
        click.echo()
        click.echo("Bridge stopped.")
    except (RuntimeError, ConfigurationError) as e:
        click.echo(style_error(f"Failed to start: {e}"), err=True)
        sys.exit(1)
