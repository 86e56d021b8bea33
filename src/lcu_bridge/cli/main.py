"""Main CLI entry point for lcu-bridge.

Defines the CLI group and registers all subcommands.

Commands:
    config   - Configuration (show, path)
    request  - Send one request to the League client through the bridge
    start    - Run the bridge in the foreground
    status   - Show connection status of a running bridge

Subcommand help:
    lcu-bridge COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import sys

import click

from lcu_bridge import __version__

from .commands.config import config
from .commands.request import request
from .commands.start import start
from .commands.status import status


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """lcu-bridge: local bridge between a desktop UI and the League client."""
    if version:
        click.echo(f"lcu-bridge {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(config)
cli.add_command(request)
cli.add_command(start)
cli.add_command(status)


def main() -> None:
    """CLI entry point."""
    cli()
