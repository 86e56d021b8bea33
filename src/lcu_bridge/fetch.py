"""Generic outbound JSON fetch.

Lets the UI read public JSON endpoints (e.g. static game data) through the
bridge. Independent of the connection state; no session is involved.
"""

from __future__ import annotations

__all__ = [
    "fetch_json",
]

import json
import logging
from typing import Any
from urllib.parse import urlsplit

import httpx

from lcu_bridge.constants import APP_NAME, DEFAULT_REQUEST_TIMEOUT_SECONDS
from lcu_bridge.exceptions import FetchError

_logger = logging.getLogger(f"{APP_NAME}.fetch")

_ALLOWED_SCHEMES = frozenset({"http", "https"})


async def fetch_json(
    url: str,
    *,
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """GET a URL and decode its JSON body.

    Args:
        url: Absolute http(s) URL.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests use httpx.MockTransport).

    Returns:
        Decoded JSON value.

    Raises:
        FetchError: Bad URL, transport failure, non-2xx status or non-JSON body.
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise FetchError(f"Invalid URL '{url}': {e}") from e
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.netloc:
        raise FetchError(f"Unsupported URL '{url}'. Only absolute http(s) URLs can be fetched")

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(f"{e.response.status_code} {e.response.reason_phrase} from {url}") from e
    except httpx.TimeoutException as e:
        raise FetchError(f"Request to {url} timed out") from e
    except httpx.HTTPError as e:
        raise FetchError(str(e) or type(e).__name__) from e
    except (httpx.InvalidURL, ValueError) as e:
        raise FetchError(f"Invalid URL '{url}': {e}") from e

    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        _logger.debug(
            {
                "event": "fetch_invalid_json",
                "message": f"Non-JSON reply from {url}",
                "status_code": response.status_code,
            }
        )
        raise FetchError(f"Reply from {url} is not valid JSON: {e}") from e
