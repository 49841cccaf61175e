"""Custom exception hierarchy for Musicboard.

All application exceptions inherit from :class:`MusicboardError`, which
carries an optional ``provider_name`` so error handlers can identify which
upstream service (e.g. "spotify", "discogs", "genius") caused the failure.

The hierarchy mirrors how the function endpoints classify failures:

    MusicboardError  (base -- catch-all for any Musicboard error)
    +-- NotConfiguredError       (upstream credential missing)
    +-- InvalidActionError       (unknown action tag, raised before any I/O)
    +-- ValidationFailureError   (bad user input, rejected before any write)
    +-- PermissionDeniedError    (caller does not own the row)
    +-- NotFoundError            (upstream 404 / unknown upstream entity)
    +-- UpstreamError            (any other upstream failure, carries status)
    |   +-- UpstreamAuthError    (token exchange / 401 / 403)
    |   +-- RateLimitError       (upstream 429)
    |   +-- PaymentRequiredError (upstream 402)
    |   +-- LLMError             (chat model call failed)
    +-- StoreError               (persistence failure)
        +-- RecordNotFoundError  (no row with that key)

Each adapter route decides whether a given class is soft (HTTP 200 with
an ``error`` field) or hard (non-2xx) for its own page, so the classes
themselves carry no HTTP policy beyond ``UpstreamError.status_code``.
"""


class MusicboardError(Exception):
    """Base exception for all Musicboard errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which upstream service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[spotify] Token exchange failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller-side errors (raised before any network call or store write)
# ---------------------------------------------------------------------------


class NotConfiguredError(MusicboardError):
    """Raised when an upstream credential is missing from the settings."""

    def __init__(
        self,
        message: str = "Upstream service is not configured",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidActionError(MusicboardError):
    """Raised when an adapter receives an action tag it does not support."""

    def __init__(
        self,
        message: str = "Invalid action",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ValidationFailureError(MusicboardError):
    """Raised when user input is rejected (short review, missing rating, ...)."""

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class PermissionDeniedError(MusicboardError):
    """Raised when a caller mutates a row it does not own."""

    def __init__(
        self,
        message: str = "You do not have permission to modify this resource",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Upstream errors
# ---------------------------------------------------------------------------


class NotFoundError(MusicboardError):
    """Raised when an upstream API answers 404 for the requested entity."""

    def __init__(
        self,
        message: str = "Resource not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UpstreamError(MusicboardError):
    """Raised when an upstream API call fails for any reason other than 404.

    ``status_code`` is the upstream HTTP status, or ``None`` for transport
    failures (DNS, timeout, connection reset).
    """

    def __init__(
        self,
        message: str = "Upstream request failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._status_code = status_code

    @property
    def status_code(self) -> int | None:
        return self._status_code


class UpstreamAuthError(UpstreamError):
    """Raised when the upstream rejects our credentials or the token exchange fails."""

    def __init__(
        self,
        message: str = "Upstream authentication failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


class RateLimitError(UpstreamError):
    """Raised when an upstream rate limit is exceeded (HTTP 429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
        status_code: int | None = 429,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


class PaymentRequiredError(UpstreamError):
    """Raised when the upstream account is out of credit (HTTP 402)."""

    def __init__(
        self,
        message: str = "Payment required",
        provider_name: str | None = None,
        status_code: int | None = 402,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


class LLMError(UpstreamError):
    """Raised when an LLM API call fails or returns an empty response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=status_code)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------


class StoreError(MusicboardError):
    """Raised when a store operation fails."""

    def __init__(
        self,
        message: str = "Store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RecordNotFoundError(StoreError):
    """Raised when a store lookup by primary key finds no row."""

    def __init__(
        self,
        message: str = "Record not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
