"""Connectivity query endpoint."""

from __future__ import annotations

__all__ = ["router"]

from fastapi import APIRouter

from lcu_bridge.core.status import display_status
from lcu_bridge.models import ConnectionStatusResponse

from ..deps import ProxyDep

router = APIRouter(prefix="/api", tags=["connection"])


@router.get("/connection", response_model=ConnectionStatusResponse)
async def connection_status(proxy: ProxyDep) -> ConnectionStatusResponse:
    """Whether a session to the League client exists, plus the status text."""
    connected = await proxy.is_connected()
    return ConnectionStatusResponse(connected=connected, status=display_status(connected))
