"""Pydantic models for lcu-bridge.

API Response Models (FrozenModel-based):
- FrozenModel: Base class for immutable models
- ConnectionStatusResponse: isConnected + display status
- BridgeStatusResponse: Bridge process health

API Request Models:
- LcuRequestBody: Proxied request descriptor from the UI

Logging Models:
- SystemEvent: System log entries for the bridge process
"""

from __future__ import annotations

__all__ = [
    "BridgeStatusResponse",
    "ConnectionStatusResponse",
    "FrozenModel",
    "LcuRequestBody",
    "SystemEvent",
]

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# API Models
# =============================================================================


class FrozenModel(BaseModel):
    """Base class for immutable Pydantic models."""

    model_config = ConfigDict(frozen=True)


class ConnectionStatusResponse(FrozenModel):
    """Response model for the connection endpoint.

    Attributes:
        connected: Whether a session to the local client currently exists.
        status: Human-readable status line for tray/status UI.
    """

    connected: bool
    status: str


class BridgeStatusResponse(FrozenModel):
    """Response model for bridge health endpoint.

    Attributes:
        running: Always True when the endpoint answers.
        pid: Process ID of the bridge.
        connected: Whether the bridge holds a session to the local client.
        subscribers: Number of UI event stream subscribers.
    """

    running: bool
    pid: int
    connected: bool
    subscribers: int


class LcuRequestBody(BaseModel):
    """A proxied request as sent by the UI.

    The method is validated by RequestProxy (not here) so that unsupported
    verbs surface as INVALID_METHOD rather than a generic validation error.
    """

    method: str = Field(min_length=1, description="GET, POST or PUT (case-insensitive)")
    path: str = Field(min_length=1, description="Client API path, e.g. '/lol-gameflow/v1/session'")
    body: Any = Field(default=None, description="JSON body, required for POST and PUT")


# =============================================================================
# Logging Models
# =============================================================================


class SystemEvent(BaseModel):
    """One system log entry (<log_dir>/lcu-bridge/system.jsonl).

    Note: 'time' is None when created, populated by ISO8601Formatter during logging.
    """

    # --- core ---
    time: Optional[str] = Field(
        None,
        description="ISO 8601 timestamp (UTC), added by formatter during serialization",
    )
    event: Optional[str] = Field(
        None,
        description="Machine-friendly event name, e.g. 'lcu_connected', 'bridge_started'",
    )
    message: str = Field(description="Human-readable log message")

    # --- connection context ---
    state: Optional[str] = Field(
        None,
        description="Connection state after the event ('connected' / 'disconnected')",
    )
    port: Optional[int] = Field(
        None,
        description="Port of the local client or bridge API",
    )

    # --- request context ---
    method: Optional[str] = Field(None, description="HTTP method of a proxied request")
    path: Optional[str] = Field(None, description="Client API path of a proxied request")
    status_code: Optional[int] = Field(None, description="HTTP status returned by the client")
    duration_ms: Optional[float] = Field(None, description="Request duration in milliseconds")

    # --- error details ---
    error_type: Optional[str] = Field(
        None,
        description="Exception class name, e.g. 'ConnectError'",
    )
    error_message: Optional[str] = Field(
        None,
        description="Short error text from exception",
    )

    # --- additional structured details ---
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional context as key-value pairs",
    )

    model_config = ConfigDict(extra="allow")
