"""Proxied League client requests."""

from __future__ import annotations

__all__ = ["router"]

from typing import Any

from fastapi import APIRouter, Request

from lcu_bridge.exceptions import BridgeError
from lcu_bridge.models import LcuRequestBody

from ..deps import ProxyDep
from ..errors import from_bridge_error

router = APIRouter(prefix="/api/lcu", tags=["lcu"])


@router.post("/request", response_model=None)
async def lcu_request(payload: LcuRequestBody, proxy: ProxyDep) -> Any:
    """Forward {method, path, body} to the client and return its JSON reply."""
    try:
        return await proxy.request(payload.method, payload.path, payload.body)
    except BridgeError as e:
        raise from_bridge_error(e) from e


@router.get("/{path:path}", response_model=None)
async def lcu_get(path: str, request: Request, proxy: ProxyDep) -> Any:
    """GET shortcut: /api/lcu/lol-gameflow/v1/session -> GET /lol-gameflow/v1/session.

    The query string is forwarded unchanged.
    """
    target = "/" + path.lstrip("/")
    if request.url.query:
        target = f"{target}?{request.url.query}"

    try:
        return await proxy.get(target)
    except BridgeError as e:
        raise from_bridge_error(e) from e
