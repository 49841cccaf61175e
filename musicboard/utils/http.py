"""Shared upstream HTTP helper for the function adapters.

Every adapter issues exactly one upstream request per step through
:func:`request_json`, which classifies the response the same way for all
of them:

    2xx             -> decoded JSON body
    404             -> NotFoundError
    401 / 403       -> UpstreamAuthError
    402             -> PaymentRequiredError
    429             -> RateLimitError
    other non-2xx   -> UpstreamError(status_code)
    transport error -> UpstreamError(status_code=None)

There are no retries; a failed call fails the invocation.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from musicboard.utils.errors import (
    NotFoundError,
    PaymentRequiredError,
    RateLimitError,
    UpstreamAuthError,
    UpstreamError,
)
from musicboard.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

USER_AGENT = "MusicboardApp/1.0"


def classify_status(response: httpx.Response, provider_name: str) -> None:
    """Raise the matching :mod:`musicboard.utils.errors` class for a non-2xx response."""
    status = response.status_code
    if response.is_success:
        return
    if status == 404:
        raise NotFoundError(message="Upstream resource not found", provider_name=provider_name)
    if status in (401, 403):
        raise UpstreamAuthError(
            message=f"Upstream rejected credentials ({status})",
            provider_name=provider_name,
            status_code=status,
        )
    if status == 402:
        raise PaymentRequiredError(provider_name=provider_name)
    if status == 429:
        raise RateLimitError(provider_name=provider_name)
    raise UpstreamError(
        message=f"Upstream error {status}: {response.reason_phrase}",
        provider_name=provider_name,
        status_code=status,
    )


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    provider_name: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    data: dict[str, Any] | None = None,
    auth: httpx.Auth | tuple[str, str] | None = None,
) -> Any:
    """Issue one upstream request and return its decoded JSON body.

    Raises
    ------
    NotFoundError, UpstreamAuthError, PaymentRequiredError, RateLimitError, UpstreamError
        See the module docstring for the status mapping.
    """
    request_headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if headers:
        request_headers.update(headers)

    try:
        response = await client.request(
            method,
            url,
            params=params,
            headers=request_headers,
            data=data,
            auth=auth,
        )
    except httpx.HTTPError as exc:
        _logger.warning("upstream_transport_failed", provider=provider_name, error=str(exc))
        raise UpstreamError(
            message=f"Request to {provider_name} failed: {exc}",
            provider_name=provider_name,
        ) from exc

    if not response.is_success:
        _logger.warning(
            "upstream_http_error",
            provider=provider_name,
            status=response.status_code,
        )
    classify_status(response, provider_name)

    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamError(
            message=f"{provider_name} returned a non-JSON body",
            provider_name=provider_name,
            status_code=response.status_code,
        ) from exc
