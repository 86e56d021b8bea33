"""Request proxy: the UI-facing command surface.

Forwards (method, path, body) to the local client through the current
session, holding exclusive store access for the whole round-trip so the
supervisor cannot tear the session down mid-request.

Errors are returned to the caller and never retried.
"""

from __future__ import annotations

__all__ = [
    "HttpMethod",
    "RequestDescriptor",
    "RequestProxy",
]

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from lcu_bridge.constants import APP_NAME, DEFAULT_REQUEST_TIMEOUT_SECONDS
from lcu_bridge.exceptions import (
    BridgeError,
    InvalidMethodError,
    MissingBodyError,
    NotConnectedError,
    RequestFailedError,
)

from .state import SharedStateStore

if TYPE_CHECKING:
    from lcu_bridge.lcu.interfaces import SessionHandle

_logger = logging.getLogger(f"{APP_NAME}.proxy")


class HttpMethod(str, Enum):
    """Methods the proxy forwards."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"

    @classmethod
    def parse(cls, value: str) -> HttpMethod:
        """Parse a method name case-insensitively.

        Raises:
            InvalidMethodError: For anything but GET, POST or PUT.
        """
        try:
            return cls(value.upper())
        except (ValueError, AttributeError):
            raise InvalidMethodError(str(value)) from None

    @property
    def requires_body(self) -> bool:
        return self is not HttpMethod.GET


@dataclass(frozen=True)
class RequestDescriptor:
    """One proxied call. Built per request, never stored."""

    method: HttpMethod
    path: str
    body: Any = None

    @classmethod
    def build(cls, method: str, path: str, body: Any = None) -> RequestDescriptor:
        return cls(HttpMethod.parse(method), path, body)

    async def send(self, session: "SessionHandle") -> Any:
        if self.method is HttpMethod.GET:
            return await session.get(self.path)
        if self.method is HttpMethod.POST:
            return await session.post(self.path, self.body)
        return await session.put(self.path, self.body)


class RequestProxy:
    """Forwards UI requests to the local client while connected.

    Args:
        store: Shared state store, also used by the supervisor.
        timeout: Upper bound for one proxied round-trip.
    """

    def __init__(self, store: SharedStateStore, *, timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS) -> None:
        self._store = store
        self._timeout = timeout

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        """Forward one request verbatim.

        Returns:
            The client's decoded reply.

        Raises:
            InvalidMethodError: Method is not GET, POST or PUT (checked first,
                independent of connection state).
            NotConnectedError: No session exists.
            MissingBodyError: POST or PUT without a body.
            RequestFailedError: The client or transport failed; the message
                is the underlying error's text.
        """
        descriptor = RequestDescriptor.build(method, path, body)

        async with self._store.access() as view:
            session = view.session
            if not view.connected or session is None:
                raise NotConnectedError()
            if descriptor.method.requires_body and descriptor.body is None:
                raise MissingBodyError(descriptor.method.value, descriptor.path)

            start = time.perf_counter()
            try:
                result = await asyncio.wait_for(descriptor.send(session), timeout=self._timeout)
            except BridgeError as e:
                self._log_failure(descriptor, e, start)
                if isinstance(e, RequestFailedError):
                    raise
                raise RequestFailedError(e.message) from e
            except asyncio.TimeoutError as e:
                failure = RequestFailedError(
                    f"{descriptor.method.value} {descriptor.path} timed out after {self._timeout}s"
                )
                self._log_failure(descriptor, failure, start)
                raise failure from e

        _logger.debug(
            {
                "event": "lcu_request_completed",
                "message": f"{descriptor.method.value} {descriptor.path}",
                "method": descriptor.method.value,
                "path": descriptor.path,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            }
        )
        return result

    async def get(self, path: str) -> Any:
        """GET shortcut."""
        return await self.request(HttpMethod.GET.value, path)

    async def is_connected(self) -> bool:
        """Current connection state, read under the store lock."""
        return await self._store.is_connected()

    def _log_failure(self, descriptor: RequestDescriptor, error: BridgeError, start: float) -> None:
        _logger.info(
            {
                "event": "lcu_request_failed",
                "message": error.message,
                "method": descriptor.method.value,
                "path": descriptor.path,
                "status_code": getattr(error, "status_code", None),
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                "error_type": type(error).__name__,
            }
        )
