"""Tests for HttpxRequestObjectFetcher"""

import httpx
import pytest
from returns.result import Failure

from wallet_selector.adapter.output.http import HttpxRequestObjectFetcher

REQUEST_URI = "https://verifier.example.com/request.jwt/abc"


def _fetcher(handler) -> HttpxRequestObjectFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxRequestObjectFetcher(timeout=1.0, client=client)


class TestHttpxRequestObjectFetcher:
    """Tests for HttpxRequestObjectFetcher"""

    @pytest.mark.asyncio
    async def test_fetch_text(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == REQUEST_URI
            return httpx.Response(200, text="a.b.c", headers={"content-type": "application/oauth-authz-req+jwt"})

        result = await _fetcher(handler).fetch_text(REQUEST_URI)

        assert result.unwrap() == "a.b.c"

    @pytest.mark.asyncio
    async def test_fetch_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"id": "pid_request"})

        result = await _fetcher(handler).fetch_json(REQUEST_URI)

        assert result.unwrap() == {"id": "pid_request"}

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        result = await _fetcher(handler).fetch_text(REQUEST_URI)

        assert isinstance(result, Failure)
        assert str(result.failure()) == f"Failed to fetch {REQUEST_URI}: HTTP 404"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await _fetcher(handler).fetch_text(REQUEST_URI)

        assert isinstance(result, Failure)
        assert "connection refused" in str(result.failure())

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="not json")

        result = await _fetcher(handler).fetch_json(REQUEST_URI)

        assert isinstance(result, Failure)
        assert "invalid JSON" in str(result.failure())
