"""Bridge status endpoint."""

from __future__ import annotations

__all__ = ["router"]

import os

from fastapi import APIRouter

from lcu_bridge.models import BridgeStatusResponse

from ..deps import BusDep, ProxyDep

router = APIRouter(prefix="/api/bridge", tags=["bridge"])


@router.get("/status", response_model=BridgeStatusResponse)
async def bridge_status(proxy: ProxyDep, bus: BusDep) -> BridgeStatusResponse:
    """Get bridge health status."""
    return BridgeStatusResponse(
        running=True,
        pid=os.getpid(),
        connected=await proxy.is_connected(),
        subscribers=bus.subscriber_count,
    )
