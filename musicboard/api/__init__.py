"""Musicboard API layer: function routes, store routes, schemas, and middleware."""

from musicboard.api.function_routes import router as function_router
from musicboard.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from musicboard.api.routes import router
from musicboard.api.schemas import ErrorResponse, HealthResponse

__all__ = [
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "HealthResponse",
    "RequestLoggingMiddleware",
    "configure_cors",
    "function_router",
    "router",
]
