"""Config command group for lcu-bridge CLI.

Reads the config file directly; no running bridge needed.
"""

from __future__ import annotations

__all__ = ["config"]

import json

import click

from lcu_bridge.config import get_config_path, get_system_log_path, load_config

from ..styling import style_header


@click.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def config_show(as_json: bool) -> None:
    """Display current configuration.

    Values missing from the config file use built-in defaults.
    """
    config_file_path = get_config_path()
    loaded_config = load_config(config_file_path)

    if as_json:
        config_dict = loaded_config.model_dump(mode="json")
        config_dict["_computed"] = {
            "config_file": str(config_file_path),
            "system_log": str(get_system_log_path(loaded_config)),
        }
        click.echo(json.dumps(config_dict, indent=2))
        return

    click.echo("\nlcu-bridge configuration:\n")

    click.echo(style_header("Bridge"))
    click.echo(f"  ui_port: {loaded_config.ui_port}")
    click.echo(f"  poll_interval_seconds: {loaded_config.poll_interval_seconds}")
    click.echo(f"  request_timeout_seconds: {loaded_config.request_timeout_seconds}")
    click.echo()

    click.echo(style_header("League client"))
    click.echo(f"  liveness_path: {loaded_config.liveness_path}")
    click.echo(f"  lockfile_path: {loaded_config.lockfile_path or '(search install locations)'}")
    click.echo()

    click.echo(style_header("Logging"))
    click.echo(f"  log_dir: {loaded_config.log_dir}")
    click.echo(f"  system: {get_system_log_path(loaded_config)}")
    click.echo()

    if not config_file_path.exists():
        click.echo(click.style(f"No config file at {config_file_path}, showing defaults.", dim=True))


@config.command("path")
def config_path() -> None:
    """Print the config file location."""
    click.echo(str(get_config_path()))
