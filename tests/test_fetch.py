"""Tests for the outbound JSON fetch."""

from __future__ import annotations

import httpx
import pytest

from lcu_bridge.exceptions import FetchError
from lcu_bridge.fetch import fetch_json

VERSIONS = ["14.20.1", "14.19.1"]


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/versions.json":
        return httpx.Response(200, json=VERSIONS)
    if request.url.path == "/html":
        return httpx.Response(200, text="<html></html>")
    return httpx.Response(404, text="missing")


TRANSPORT = httpx.MockTransport(_handler)


class TestFetchJson:
    """Tests for fetch_json."""

    async def test_returns_decoded_json(self) -> None:
        result = await fetch_json("https://ddragon.leagueoflegends.com/api/versions.json", transport=TRANSPORT)

        assert result == VERSIONS

    @pytest.mark.parametrize("url", ["file:///etc/passwd", "ftp://example.com/x", "/relative", "https://"])
    async def test_rejects_non_http_urls(self, url: str) -> None:
        with pytest.raises(FetchError, match="Unsupported URL"):
            await fetch_json(url, transport=TRANSPORT)

    async def test_error_status(self) -> None:
        with pytest.raises(FetchError, match="404"):
            await fetch_json("https://example.com/nope", transport=TRANSPORT)

    async def test_non_json_body(self) -> None:
        with pytest.raises(FetchError, match="not valid JSON"):
            await fetch_json("https://example.com/html", transport=TRANSPORT)

    async def test_transport_failure(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Name or service not known", request=request)

        with pytest.raises(FetchError, match="Name or service not known"):
            await fetch_json("https://example.invalid/", transport=httpx.MockTransport(refuse))

    @pytest.mark.parametrize("url", ["http://[::1", "https://[::1/versions.json", "https://example.com:port/"])
    async def test_malformed_url_is_fetch_error(self, url: str) -> None:
        with pytest.raises(FetchError, match="Invalid URL"):
            await fetch_json(url, transport=TRANSPORT)
