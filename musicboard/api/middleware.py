"""API middleware: CORS, request logging, and error handling.

Provides helper functions and middleware classes to configure cross-origin
resource sharing, structured request logging (via structlog), and automatic
conversion of ``MusicboardError`` subclasses into JSON ``ErrorResponse``
bodies with a status code chosen per exception class.

# ─── MIDDLEWARE EXECUTION ORDER ───────────────────────────────────────
#
# Starlette middleware is a stack (last added, first executed):
#
#   In main.py:
#     app.add_middleware(ErrorHandlingMiddleware)   # added 1st → inner
#     app.add_middleware(RequestLoggingMiddleware)  # added 2nd → outer
#
#   Request flow:
#     Client → RequestLogging → ErrorHandling → route handler
#
# So RequestLoggingMiddleware sees the *final* status code, including
# the one ErrorHandling chose for a structured error.
#
# The function routes (/functions/v1/*) convert their own errors and
# never let a MusicboardError reach this layer; the store routes
# (/api/v1/*) rely on it.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from musicboard.api.schemas import ErrorResponse
from musicboard.utils.errors import (
    InvalidActionError,
    MusicboardError,
    NotFoundError,
    PermissionDeniedError,
    RecordNotFoundError,
    UpstreamError,
    ValidationFailureError,
)
from musicboard.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# Upstream statuses passed through to the caller unchanged.
_PASSTHROUGH_STATUSES = frozenset({402, 429})


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Explicit list of allowed origins.  Defaults to ``["*"]``, which
        is what the browser pages of every deployment expect.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


def status_for_error(exc: MusicboardError) -> int:
    """Map an application error to the HTTP status the store routes return."""
    if isinstance(exc, (ValidationFailureError, InvalidActionError)):
        return 400
    if isinstance(exc, PermissionDeniedError):
        return 403
    if isinstance(exc, (RecordNotFoundError, NotFoundError)):
        return 404
    if isinstance(exc, UpstreamError) and exc.status_code in _PASSTHROUGH_STATUSES:
        return exc.status_code
    return 500


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch ``MusicboardError`` subclasses and return structured JSON errors.

    The body is an :class:`ErrorResponse` whose ``error`` is the
    user-facing message and whose ``detail`` names the exception class.
    Stack traces stay in the server log.  Exceptions outside the
    hierarchy bubble up to Starlette's default 500 handler.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except MusicboardError as exc:
            status_code = status_for_error(exc)
            log = _logger.error if status_code >= 500 else _logger.warning
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
                status=status_code,
            )
            body = ErrorResponse(
                error=exc.message,
                detail=type(exc).__name__,
            )
            return JSONResponse(
                status_code=status_code,
                content=body.model_dump(),
            )
