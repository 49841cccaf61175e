"""Utility modules for Musicboard.

- **errors** -- exception hierarchy rooted at MusicboardError; the
  function routes map each class onto a soft or hard HTTP response.
- **http** -- the single upstream request helper shared by every adapter,
  which classifies non-2xx responses into the error hierarchy.
- **logging** -- structlog setup (console in development, JSON in
  production) with credential redaction.
- **text_normalizer** -- title normalization and fuzzy match confidence
  for comparing user queries with upstream catalog titles.
"""

from musicboard.utils.errors import (
    InvalidActionError,
    LLMError,
    MusicboardError,
    NotConfiguredError,
    NotFoundError,
    PaymentRequiredError,
    PermissionDeniedError,
    RateLimitError,
    RecordNotFoundError,
    StoreError,
    UpstreamAuthError,
    UpstreamError,
    ValidationFailureError,
)
from musicboard.utils.logging import configure_logging, get_logger
from musicboard.utils.text_normalizer import match_confidence, normalize_title

__all__ = [
    "InvalidActionError",
    "LLMError",
    "MusicboardError",
    "NotConfiguredError",
    "NotFoundError",
    "PaymentRequiredError",
    "PermissionDeniedError",
    "RateLimitError",
    "RecordNotFoundError",
    "StoreError",
    "UpstreamAuthError",
    "UpstreamError",
    "ValidationFailureError",
    "configure_logging",
    "get_logger",
    "match_confidence",
    "normalize_title",
]
