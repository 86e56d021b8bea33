"""Structured API error handling.

This module provides:
- ErrorCode enum with the error codes the UI can branch on
- APIError exception class for structured error responses
- from_bridge_error(): maps bridge exceptions to APIError
- Global exception handlers for consistent error formatting

Usage:
    from lcu_bridge.api.errors import APIError, ErrorCode

    raise APIError(
        status_code=503,
        code=ErrorCode.LCU_NOT_CONNECTED,
        message="Not connected to League client",
    )

Response format:
    {
        "detail": {
            "code": "LCU_NOT_CONNECTED",
            "message": "Not connected to League client",
            "details": {...}
        }
    }
"""

from __future__ import annotations

__all__ = [
    "APIError",
    "ErrorCode",
    "api_error_handler",
    "from_bridge_error",
    "http_exception_handler",
    "validation_error_handler",
]

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lcu_bridge.exceptions import (
    BridgeError,
    FetchError,
    InvalidMethodError,
    LcuRequestError,
    MissingBodyError,
    NotConnectedError,
    RequestFailedError,
)


class ErrorCode(str, Enum):
    """API error codes for programmatic handling.

    Codes are namespaced by domain:
    - LCU_*: Local client connection errors
    - FETCH_*: Outbound fetch errors
    - VALIDATION_* / INVALID_* / MISSING_*: Input errors
    - INTERNAL_*: Internal server errors
    """

    # Connection errors (503)
    LCU_NOT_CONNECTED = "LCU_NOT_CONNECTED"

    # Input errors (400, 422)
    INVALID_METHOD = "INVALID_METHOD"
    MISSING_BODY = "MISSING_BODY"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Upstream errors (502)
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    FETCH_FAILED = "FETCH_FAILED"

    # Generic
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class APIError(HTTPException):
    """Structured API error with error code.

    Attributes:
        status_code: HTTP status code.
        code: Error code from ErrorCode enum.
        error_message: Human-readable error message.
        error_details: Optional contextual details.
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.error_message = message
        self.error_details = details

        detail: dict[str, Any] = {
            "code": code.value,
            "message": message,
        }
        if details:
            detail["details"] = details

        super().__init__(status_code=status_code, detail=detail)


# First match wins; LcuRequestError is covered by its RequestFailedError base
_BRIDGE_ERROR_MAP: tuple[tuple[type[BridgeError], int, ErrorCode], ...] = (
    (NotConnectedError, 503, ErrorCode.LCU_NOT_CONNECTED),
    (InvalidMethodError, 400, ErrorCode.INVALID_METHOD),
    (MissingBodyError, 400, ErrorCode.MISSING_BODY),
    (RequestFailedError, 502, ErrorCode.UPSTREAM_ERROR),
    (FetchError, 502, ErrorCode.FETCH_FAILED),
)


def from_bridge_error(exc: BridgeError) -> APIError:
    """Convert a bridge exception into a structured APIError.

    The message is passed through unchanged. For client replies the
    client's own HTTP status is included in details as upstream_status.
    """
    details: dict[str, Any] | None = None
    if isinstance(exc, LcuRequestError) and exc.status_code is not None:
        details = {"upstream_status": exc.status_code}

    for exc_type, status_code, code in _BRIDGE_ERROR_MAP:
        if isinstance(exc, exc_type):
            return APIError(status_code=status_code, code=code, message=exc.message, details=details)

    return APIError(status_code=500, code=ErrorCode.INTERNAL_ERROR, message=exc.message)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions with structured response."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors with structured response.

    Keeps the field-level error list so the UI can point at the bad field.
    """
    errors = exc.errors()
    first_error = errors[0] if errors else {}

    loc = first_error.get("loc", [])
    msg = first_error.get("msg", "Validation error")

    if len(errors) == 1:
        # Filter out 'body'/'query' from location path
        field_parts = [str(part) for part in loc if part not in ("body", "query")]
        field_name = ".".join(field_parts)
        message = f"{field_name}: {msg}" if field_name else msg
    else:
        message = f"{len(errors)} validation errors"

    detail: dict[str, Any] = {
        "code": ErrorCode.VALIDATION_ERROR.value,
        "message": message,
        "validation_errors": [
            {
                "loc": list(e.get("loc", [])),
                "msg": e.get("msg", ""),
                "type": e.get("type", ""),
            }
            for e in errors
        ],
    }

    return JSONResponse(
        status_code=422,
        content={"detail": detail},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle plain HTTPException (e.g. router 404s) in the structured format."""
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    code = _status_to_error_code(exc.status_code)
    message = str(exc.detail) if exc.detail else f"HTTP {exc.status_code}"

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"code": code.value, "message": message}},
    )


def _status_to_error_code(status_code: int) -> ErrorCode:
    """Map HTTP status code to default error code."""
    mapping = {
        400: ErrorCode.VALIDATION_ERROR,
        404: ErrorCode.NOT_FOUND,
        500: ErrorCode.INTERNAL_ERROR,
        502: ErrorCode.UPSTREAM_ERROR,
        503: ErrorCode.SERVICE_UNAVAILABLE,
    }
    return mapping.get(status_code, ErrorCode.INTERNAL_ERROR)
