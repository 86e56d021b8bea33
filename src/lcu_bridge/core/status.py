"""Status text for the tray/status UI."""

from __future__ import annotations

__all__ = [
    "STATUS_CONNECTED",
    "STATUS_DISCONNECTED",
    "display_status",
]

STATUS_CONNECTED = "Connected to League client"
STATUS_DISCONNECTED = "Waiting for League client..."


def display_status(connected: bool) -> str:
    """Human-readable connection status line."""
    return STATUS_CONNECTED if connected else STATUS_DISCONNECTED
