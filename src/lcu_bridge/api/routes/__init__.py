"""Bridge routes package - API routes for the UI.

- lcu: proxied client requests (POST /api/lcu/request, GET /api/lcu/{path})
- connection: connectivity query
- fetch: outbound JSON fetch
- events: SSE stream of UI bus events
- status: bridge health
"""

from __future__ import annotations

__all__ = [
    "create_bridge_api_app",
]

from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from lcu_bridge import __version__
from lcu_bridge.bus import UIEventBus
from lcu_bridge.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, SSE_KEEPALIVE_SECONDS
from lcu_bridge.core.proxy import RequestProxy

from ..deps import ApiSettings
from ..errors import (
    APIError,
    api_error_handler,
    http_exception_handler,
    validation_error_handler,
)

from . import connection
from . import events
from . import fetch
from . import lcu
from . import status


def create_bridge_api_app(
    proxy: RequestProxy,
    bus: UIEventBus,
    *,
    fetch_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    sse_keepalive_seconds: float = SSE_KEEPALIVE_SECONDS,
    fetch_transport: Any = None,
) -> FastAPI:
    """Create the FastAPI application the UI talks to.

    Args:
        proxy: Request proxy bound to the shared state store.
        bus: UI event bus streamed over /api/events.
        fetch_timeout: Timeout for /api/fetch requests.
        sse_keepalive_seconds: Idle time before an SSE keepalive comment.
        fetch_transport: Optional httpx transport for /api/fetch (tests).

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="LCU Bridge",
        description="Local bridge between a desktop UI and the League client",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.proxy = proxy
    app.state.bus = bus
    app.state.settings = ApiSettings(
        fetch_timeout=fetch_timeout,
        sse_keepalive_seconds=sse_keepalive_seconds,
        fetch_transport=fetch_transport,
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(status.router)
    app.include_router(connection.router)
    app.include_router(fetch.router)
    app.include_router(events.router)
    app.include_router(lcu.router)

    return app
