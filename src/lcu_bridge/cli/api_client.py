"""API client helper for CLI commands that talk to a running bridge.

The bridge only listens on loopback, so the CLI reaches it at
http://127.0.0.1:<port> without authentication.

Commands that only read local files (config show/path) must not use
this module.
"""

from __future__ import annotations

__all__ = [
    "BridgeAPIError",
    "BridgeNotRunningError",
    "api_request",
]

import json
import time
from typing import Any

import click
import httpx

from lcu_bridge.constants import BRIDGE_HOST, CLI_REQUEST_TIMEOUT_SECONDS


class BridgeNotRunningError(click.ClickException):
    """Raised when nothing answers on the bridge port."""

    def __init__(self, port: int) -> None:
        super().__init__(f"Bridge is not running on port {port}.\nStart it with: lcu-bridge start --port {port}")
        self.port = port


class BridgeAPIError(click.ClickException):
    """Raised when the bridge answers with an error status.

    Attributes:
        status_code: HTTP status of the bridge reply.
        code: Structured error code (e.g. LCU_NOT_CONNECTED) when present.
    """

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None) -> None:
        if status_code:
            super().__init__(f"API error ({status_code}): {message}")
        else:
            super().__init__(f"API error: {message}")
        self.status_code = status_code
        self.code = code


def _error_detail(response: httpx.Response) -> tuple[str, str | None]:
    """Pull (message, code) out of a structured error reply."""
    try:
        detail = response.json().get("detail")
    except (json.JSONDecodeError, AttributeError):
        return response.text or response.reason_phrase, None

    if isinstance(detail, dict):
        return str(detail.get("message", detail)), detail.get("code")
    if detail is None:
        return response.reason_phrase, None
    return str(detail), None


def api_request(
    method: str,
    endpoint: str,
    *,
    port: int,
    json_data: Any = None,
    params: dict[str, Any] | None = None,
    timeout: float = CLI_REQUEST_TIMEOUT_SECONDS,
    max_retries: int = 3,
    backoff_ms: int = 100,
    transport: httpx.BaseTransport | None = None,
) -> Any:
    """Make an API request to a running bridge.

    Retries connection failures with exponential backoff, for the case
    where the CLI runs right after 'lcu-bridge start'.

    Args:
        method: HTTP method.
        endpoint: API endpoint path (e.g., "/api/connection").
        port: Bridge port.
        json_data: Optional JSON body.
        params: Optional query parameters.
        timeout: Request timeout in seconds.
        max_retries: Maximum connection attempts (default 3).
        backoff_ms: Initial backoff in milliseconds (doubles each retry).
        transport: Optional httpx transport (tests use httpx.MockTransport).

    Returns:
        Parsed JSON reply (None for empty replies).

    Raises:
        BridgeNotRunningError: If the bridge does not accept connections.
        BridgeAPIError: If the request fails or returns an error status.
    """
    last_error: Exception | None = None

    for attempt in range(max_retries):
        try:
            with httpx.Client(
                base_url=f"http://{BRIDGE_HOST}:{port}",
                timeout=timeout,
                transport=transport,
            ) as client:
                response = client.request(method, endpoint, json=json_data, params=params)

        except httpx.ConnectError as e:
            # Connection refused - retry with backoff
            last_error = e
            if attempt < max_retries - 1:
                # Exponential backoff: 100ms, 200ms, 400ms
                time.sleep(backoff_ms / 1000 * (2**attempt))
            continue

        except httpx.HTTPError as e:
            raise BridgeAPIError(str(e) or type(e).__name__) from e

        if response.is_error:
            message, code = _error_detail(response)
            raise BridgeAPIError(message, response.status_code, code)

        if not response.content:
            return None
        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise BridgeAPIError(f"Invalid JSON from bridge: {e}", response.status_code) from e

    # All retries exhausted
    raise BridgeNotRunningError(port) from last_error
