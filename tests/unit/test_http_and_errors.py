"""Unit tests for the upstream HTTP helper and the error hierarchy."""

from __future__ import annotations

import httpx
import pytest

from musicboard.utils.errors import (
    LLMError,
    MusicboardError,
    NotFoundError,
    PaymentRequiredError,
    RateLimitError,
    RecordNotFoundError,
    StoreError,
    UpstreamAuthError,
    UpstreamError,
)
from musicboard.utils.http import USER_AGENT, request_json

_URL = "https://upstream.test/resource"


# ─── Error hierarchy ──────────────────────────────────────────────


class TestErrors:
    def test_str_prefixes_provider(self) -> None:
        err = UpstreamError(message="boom", provider_name="spotify", status_code=500)
        assert str(err) == "[spotify] boom"
        assert err.status_code == 500

    def test_str_without_provider(self) -> None:
        assert str(MusicboardError(message="plain")) == "plain"

    def test_passthrough_statuses(self) -> None:
        assert RateLimitError().status_code == 429
        assert PaymentRequiredError().status_code == 402

    def test_hierarchy(self) -> None:
        assert issubclass(UpstreamAuthError, UpstreamError)
        assert issubclass(LLMError, UpstreamError)
        assert issubclass(RecordNotFoundError, StoreError)
        assert not issubclass(NotFoundError, UpstreamError)


# ─── request_json ─────────────────────────────────────────────────


class TestRequestJson:
    @pytest.mark.asyncio
    async def test_success_returns_json_and_sends_user_agent(self, mock_http) -> None:
        client = mock_http(lambda request: httpx.Response(200, json={"ok": True}))

        data = await request_json(client, "GET", _URL, provider_name="test", params={"q": "x"})

        assert data == {"ok": True}
        sent = mock_http.requests[0]
        assert sent.headers["User-Agent"] == USER_AGENT
        assert sent.url.params["q"] == "x"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error_cls"),
        [
            (404, NotFoundError),
            (401, UpstreamAuthError),
            (403, UpstreamAuthError),
            (402, PaymentRequiredError),
            (429, RateLimitError),
            (500, UpstreamError),
            (503, UpstreamError),
        ],
    )
    async def test_status_classification(self, mock_http, status: int, error_cls: type) -> None:
        client = mock_http(lambda request: httpx.Response(status, json={}))

        with pytest.raises(error_cls) as exc_info:
            await request_json(client, "GET", _URL, provider_name="test")

        assert exc_info.value.provider_name == "test"

    @pytest.mark.asyncio
    async def test_other_status_is_carried(self, mock_http) -> None:
        client = mock_http(lambda request: httpx.Response(502))

        with pytest.raises(UpstreamError) as exc_info:
            await request_json(client, "GET", _URL, provider_name="test")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_error_has_no_status(self, mock_http) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = mock_http(handler)

        with pytest.raises(UpstreamError) as exc_info:
            await request_json(client, "GET", _URL, provider_name="test")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_non_json_body(self, mock_http) -> None:
        client = mock_http(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(UpstreamError):
            await request_json(client, "GET", _URL, provider_name="test")
