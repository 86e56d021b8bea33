"""Outbound JSON fetch endpoint."""

from __future__ import annotations

__all__ = ["router"]

from typing import Any

from fastapi import APIRouter, Query

from lcu_bridge.exceptions import FetchError
from lcu_bridge.fetch import fetch_json

from ..deps import SettingsDep
from ..errors import from_bridge_error

router = APIRouter(prefix="/api", tags=["fetch"])


@router.get("/fetch", response_model=None)
async def fetch(settings: SettingsDep, url: str = Query(min_length=1)) -> Any:
    """GET an external http(s) URL and return its JSON body."""
    try:
        return await fetch_json(url, timeout=settings.fetch_timeout, transport=settings.fetch_transport)
    except FetchError as e:
        raise from_bridge_error(e) from e
