"""Status command for lcu-bridge CLI.

Shows whether a running bridge is connected to the League client.
Requires a running bridge (uses the API).
"""

from __future__ import annotations

__all__ = ["status"]

import json
from typing import Any

import click

from lcu_bridge.cli.api_client import BridgeAPIError, api_request
from lcu_bridge.config import load_config
from lcu_bridge.constants import BRIDGE_HOST
from lcu_bridge.core.status import display_status

from ..styling import style_label, style_success, style_warning


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--port", "-p", type=int, default=None, help="Bridge port (default: config value)")
def status(as_json: bool, port: int | None) -> None:
    """Show bridge and League client connection status.

    Examples:
        lcu-bridge status
        lcu-bridge status --json
    """
    effective_port = port if port is not None else load_config().ui_port

    connection = _as_dict(api_request("GET", "/api/connection", port=effective_port))
    connected = bool(connection.get("connected", False))

    # Best effort - connection status alone is enough to answer
    try:
        bridge = _as_dict(api_request("GET", "/api/bridge/status", port=effective_port))
    except BridgeAPIError:
        bridge = {}

    result = {
        "connected": connected,
        "status": connection.get("status") or display_status(connected),
        "bridge": {
            "url": f"http://{BRIDGE_HOST}:{effective_port}",
            "pid": bridge.get("pid"),
            "subscribers": bridge.get("subscribers", 0),
        },
    }

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    if connected:
        click.echo(style_success(result["status"]))
    else:
        click.echo(style_warning(result["status"]))
    click.echo(f"{style_label('Bridge')} {result['bridge']['url']}")
    if result["bridge"]["pid"] is not None:
        click.echo(f"{style_label('PID')} {result['bridge']['pid']}")
    click.echo(f"{style_label('UI subscribers')} {result['bridge']['subscribers']}")
