"""Custom exceptions for lcu-bridge.

This module contains all custom exceptions used throughout the package.
Exceptions are organized into two categories:

Supervisor-internal (logged and absorbed, the loop continues):
    - ConnectFailedError: Discovery/authentication to the local client failed
    - LivenessLostError: An established session stopped responding

Request-level (returned to the caller, never retried internally):
    - NotConnectedError: Request arrived while disconnected
    - InvalidMethodError: Unsupported HTTP verb
    - MissingBodyError: POST/PUT without a body
    - RequestFailedError: Transport or application error from the local client
    - FetchError: Generic outbound fetch failed

Usage:
    from lcu_bridge.exceptions import NotConnectedError, RequestFailedError
"""

from __future__ import annotations

__all__ = [
    "BridgeError",
    "ConfigurationError",
    "ConnectFailedError",
    "EventEmitError",
    "FetchError",
    "InvalidMethodError",
    "LcuRequestError",
    "LivenessLostError",
    "MissingBodyError",
    "NotConnectedError",
    "RequestFailedError",
]


class BridgeError(Exception):
    """Base class for lcu-bridge errors.

    Attributes:
        code: Stable machine-readable error code (used by the API layer).
        message: Human-readable error message.
    """

    code: str = "BRIDGE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# =============================================================================
# Supervisor-internal errors
# =============================================================================


class ConnectFailedError(BridgeError):
    """Locating or authenticating to the local client failed.

    Recovered automatically: the supervisor retries on its next tick.
    """

    code = "CONNECT_FAILED"


class LivenessLostError(BridgeError):
    """An established session stopped answering the liveness check."""

    code = "LIVENESS_LOST"


# =============================================================================
# Request-level errors
# =============================================================================


class NotConnectedError(BridgeError):
    """A proxied request arrived while no session exists."""

    code = "LCU_NOT_CONNECTED"

    def __init__(self, message: str = "Not connected to League client") -> None:
        super().__init__(message)


class InvalidMethodError(BridgeError):
    """Caller supplied a method other than GET, POST or PUT."""

    code = "INVALID_METHOD"

    def __init__(self, method: str) -> None:
        super().__init__(f"Invalid method '{method}'. Expected one of GET, POST, PUT")
        self.method = method


class MissingBodyError(BridgeError):
    """POST or PUT was issued without a request body."""

    code = "MISSING_BODY"

    def __init__(self, method: str, path: str) -> None:
        super().__init__(f"{method} {path} requires a request body")
        self.method = method
        self.path = path


class RequestFailedError(BridgeError):
    """The local client rejected the request or the transport failed.

    The message is the underlying error's description, passed through
    unchanged to the caller.
    """

    code = "UPSTREAM_ERROR"


class LcuRequestError(RequestFailedError):
    """Error raised by the local client adapter.

    Attributes:
        status_code: HTTP status returned by the client, None for transport errors.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchError(BridgeError):
    """Generic outbound fetch failed (no session involved)."""

    code = "FETCH_FAILED"


# =============================================================================
# Infrastructure errors
# =============================================================================


class EventEmitError(BridgeError):
    """The UI event boundary is unreachable (bus closed)."""

    code = "EVENT_EMIT_FAILED"


class ConfigurationError(BridgeError):
    """Configuration file is missing, unreadable or invalid."""

    code = "CONFIG_INVALID"
