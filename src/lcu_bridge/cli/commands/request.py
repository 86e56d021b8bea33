"""Request command for lcu-bridge CLI.

Sends one request to the League client through a running bridge.
"""

from __future__ import annotations

__all__ = ["request"]

import json
from typing import Any

import click

from lcu_bridge.cli.api_client import api_request
from lcu_bridge.config import load_config


def _parse_body(value: str | None) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--body") from e


@click.command()
@click.argument("method")
@click.argument("path")
@click.option("--body", "-b", default=None, help="JSON request body (required for POST and PUT)")
@click.option("--port", "-p", type=int, default=None, help="Bridge port (default: config value)")
def request(method: str, path: str, body: str | None, port: int | None) -> None:
    """Send METHOD PATH to the League client and print the reply.

    \b
    Examples:
        lcu-bridge request GET /lol-gameflow/v1/gameflow-phase
        lcu-bridge request POST /lol-lobby/v2/lobby --body '{"queueId": 420}'
    """
    payload = _parse_body(body)
    effective_port = port if port is not None else load_config().ui_port

    result = api_request(
        "POST",
        "/api/lcu/request",
        port=effective_port,
        json_data={"method": method, "path": path, "body": payload},
    )
    click.echo(json.dumps(result, indent=2))
