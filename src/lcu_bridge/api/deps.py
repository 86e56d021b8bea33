"""Shared dependencies for API routes.

Route modules take their collaborators from app.state through these
dependencies rather than reading request.app.state directly.

Usage with Annotated:
    from lcu_bridge.api.deps import ProxyDep

    @router.get("/connection")
    async def connection(proxy: ProxyDep) -> ConnectionStatusResponse:
        ...
"""

from __future__ import annotations

__all__ = [
    "ApiSettings",
    # Dependency functions
    "get_bus",
    "get_proxy",
    "get_settings",
    # Type aliases for Annotated pattern
    "BusDep",
    "ProxyDep",
    "SettingsDep",
]

from dataclasses import dataclass
from typing import Annotated, Any, Callable

from fastapi import Depends, Request

from lcu_bridge.bus import UIEventBus
from lcu_bridge.core.proxy import RequestProxy

from .errors import APIError, ErrorCode


@dataclass(frozen=True)
class ApiSettings:
    """Per-app settings that routes read (timeouts, test transports)."""

    fetch_timeout: float
    sse_keepalive_seconds: float
    fetch_transport: Any = None


def _create_state_getter(attr_name: str, type_hint: str) -> Callable[[Request], Any]:
    """Create a dependency function that retrieves a value from app.state.

    Raises a 503 APIError when the attribute is missing (app still starting).
    """

    def getter(request: Request) -> Any:
        value = getattr(request.app.state, attr_name, None)
        if value is None:
            raise APIError(
                status_code=503,
                code=ErrorCode.SERVICE_UNAVAILABLE,
                message=f"{type_hint} not available. Bridge may still be starting.",
            )
        return value

    getter.__name__ = f"get_{attr_name}"
    getter.__doc__ = f"Get {type_hint} from app.state.\n\nRaises APIError 503 if not available."
    return getter


get_proxy: Callable[[Request], RequestProxy] = _create_state_getter("proxy", "RequestProxy")
get_bus: Callable[[Request], UIEventBus] = _create_state_getter("bus", "UIEventBus")
get_settings: Callable[[Request], ApiSettings] = _create_state_getter("settings", "ApiSettings")


ProxyDep = Annotated[RequestProxy, Depends(get_proxy)]
BusDep = Annotated[UIEventBus, Depends(get_bus)]
SettingsDep = Annotated[ApiSettings, Depends(get_settings)]
