"""Command-line interface for lcu-bridge.

Provides commands for running the bridge, checking its connection to the
League client, proxying single requests, and inspecting configuration.
"""

from .main import cli, main

__all__ = ["cli", "main"]
