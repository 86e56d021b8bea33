"""REST side of the local client adapter.

LcuConnector implements LocalServiceClient: every connect() re-reads the
lockfile (port and token change per launch), builds an authenticated
httpx.AsyncClient and probes it once before handing out an LcuSession.

The client serves a self-signed certificate on loopback, so TLS
verification is disabled for these connections only.
"""

from __future__ import annotations

__all__ = [
    "LcuConnector",
    "LcuSession",
]

import json
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import httpx

from lcu_bridge.constants import (
    APP_NAME,
    DEFAULT_LIVENESS_PATH,
    DEFAULT_LOCKFILE_DIRS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    WEBSOCKET_OPEN_TIMEOUT_SECONDS,
)
from lcu_bridge.exceptions import ConnectFailedError, LcuRequestError

from .interfaces import PushChannel, SessionHandle
from .lockfile import LockfileCredentials, read_credentials
from .websocket import LcuWebSocket

_logger = logging.getLogger(f"{APP_NAME}.lcu.client")


def _error_message(response: httpx.Response) -> str:
    """Extract the client's own error message from a non-2xx reply.

    The client answers errors with {"errorCode": ..., "httpStatus": ..., "message": ...}.
    """
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        data = None

    if isinstance(data, dict) and data.get("message"):
        return f"{response.status_code}: {data['message']}"
    text = response.text.strip()
    if text:
        return f"{response.status_code}: {text}"
    return f"{response.status_code}: {response.reason_phrase}"


class LcuSession:
    """Authenticated REST session to the local client.

    Usage:
        session = await connector.connect()
        summoner = await session.get("/lol-summoner/v1/current-summoner")
        await session.aclose()
    """

    def __init__(self, http: httpx.AsyncClient, credentials: LockfileCredentials) -> None:
        self._http = http
        self._credentials = credentials

    @property
    def credentials(self) -> LockfileCredentials:
        """Credentials this session was opened with."""
        return self._credentials

    @property
    def closed(self) -> bool:
        """Whether aclose() has been called."""
        return self._http.is_closed

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        """Issue one request and decode the JSON reply.

        Args:
            method: HTTP method.
            path: Client API path (e.g. "/lol-gameflow/v1/session").
            body: JSON body, sent only when not None.

        Returns:
            Decoded JSON reply, or None for empty replies (204).

        Raises:
            LcuRequestError: On transport failure, timeout, non-2xx status
                or an undecodable reply.
        """
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body

        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise LcuRequestError(f"{method} {path} timed out: {str(e) or type(e).__name__}") from e
        except httpx.HTTPError as e:
            raise LcuRequestError(str(e) or type(e).__name__) from e

        if response.is_error:
            raise LcuRequestError(_error_message(response), status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise LcuRequestError(
                f"Invalid JSON in reply to {method} {path}: {e}",
                status_code=response.status_code,
            ) from e

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, body: Any) -> Any:
        return await self.request("POST", path, body)

    async def put(self, path: str, body: Any) -> Any:
        return await self.request("PUT", path, body)

    async def aclose(self) -> None:
        """Release the underlying connection pool."""
        await self._http.aclose()


class LcuConnector:
    """LocalServiceClient backed by the lockfile, httpx and websockets.

    Args:
        lockfile_path: Explicit lockfile. When None, search_dirs are scanned.
        search_dirs: Install directories searched for the lockfile.
        timeout: Per-request timeout in seconds.
        probe_path: Path requested once by connect() to prove the session works.
        transport: Optional httpx transport (tests use httpx.MockTransport).
        websocket_factory: Optional replacement for websockets' connect().
    """

    def __init__(
        self,
        lockfile_path: str | Path | None = None,
        search_dirs: Iterable[str | Path] = DEFAULT_LOCKFILE_DIRS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        probe_path: str = DEFAULT_LIVENESS_PATH,
        transport: httpx.AsyncBaseTransport | None = None,
        websocket_factory: Any = None,
    ) -> None:
        self._lockfile_path = lockfile_path
        self._search_dirs = tuple(search_dirs)
        self._timeout = timeout
        self._probe_path = probe_path
        self._transport = transport
        self._websocket_factory = websocket_factory

    async def connect(self) -> LcuSession:
        """Discover the client and open an authenticated session.

        The session is closed again on every failure path, including
        cancellation of a slow probe.

        Raises:
            ConnectFailedError: If the lockfile is missing/invalid or the
                client does not answer the probe request.
        """
        credentials = read_credentials(self._lockfile_path, self._search_dirs)

        try:
            http = httpx.AsyncClient(
                base_url=credentials.base_url,
                headers={
                    "Authorization": credentials.auth_header,
                    "Accept": "application/json",
                },
                verify=False,
                timeout=self._timeout,
                transport=self._transport,
            )
        except (ValueError, UnicodeError, httpx.InvalidURL) as e:
            raise ConnectFailedError(f"Unusable lockfile credentials: {e}") from e
        session = LcuSession(http, credentials)

        try:
            await session.get(self._probe_path)
        except (LcuRequestError, OverflowError, ValueError) as e:
            await session.aclose()
            raise ConnectFailedError(f"League client on port {credentials.port} did not answer: {e}") from e
        except BaseException:
            await session.aclose()
            raise

        _logger.debug(
            {
                "event": "lcu_session_opened",
                "message": f"Session opened to League client on port {credentials.port}",
                "port": credentials.port,
                "pid": credentials.pid,
            }
        )
        return session

    async def open_push_channel(
        self,
        session: SessionHandle,
        prepare: Callable[[PushChannel], object] | None = None,
    ) -> PushChannel:
        """Open the push channel for an established session.

        Args:
            session: Session returned by connect().
            prepare: Called with the channel before it connects, so that
                subscriptions registered there are sent as part of the
                handshake.

        Raises:
            TypeError: If session was not created by this connector.
            ConnectFailedError: If the websocket cannot be opened.
        """
        if not isinstance(session, LcuSession):
            raise TypeError(f"Expected LcuSession, got {type(session).__name__}")

        channel = LcuWebSocket(
            session.credentials,
            open_timeout=WEBSOCKET_OPEN_TIMEOUT_SECONDS,
            connect=self._websocket_factory,
        )
        if prepare is not None:
            prepare(channel)
        await channel.start()
        return channel
