from __future__ import annotations

import httpx
import pytest

from country_search.collector.api_client import (
    APIClientError,
    APIServerError,
    APITimeoutError,
    APIUnexpectedStatusError,
    CountriesClient,
    ResponseDecodeError,
)

URL = "https://countries.example.test/countries"


def _client(handler) -> CountriesClient:
    return CountriesClient(URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_returns_decoded_json():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"name": {"common": "Canada"}}])

    async with _client(handler) as client:
        data = await client.fetch_countries()

    assert data == [{"name": {"common": "Canada"}}]
    assert len(seen) == 1
    assert seen[0].method == "GET"
    assert str(seen[0].url) == URL
    assert seen[0].url.query == b""
    assert "authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_non_json_body_raises_decode_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    async with _client(handler) as client:
        with pytest.raises(ResponseDecodeError):
            await client.fetch_countries()


@pytest.mark.asyncio
async def test_server_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    async with _client(handler) as client:
        with pytest.raises(APIServerError):
            await client.fetch_countries()


@pytest.mark.asyncio
async def test_unexpected_status_keeps_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="not here")

    async with _client(handler) as client:
        with pytest.raises(APIUnexpectedStatusError) as exc:
            await client.fetch_countries()

    assert exc.value.status_code == 404
    assert exc.value.body_text == "not here"


@pytest.mark.asyncio
async def test_timeout_maps_to_api_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    async with _client(handler) as client:
        with pytest.raises(APITimeoutError):
            await client.fetch_countries()


@pytest.mark.asyncio
async def test_network_error_maps_to_client_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(APIClientError) as exc:
            await client.fetch_countries()

    assert type(exc.value) is APIClientError


def test_empty_url_rejected():
    with pytest.raises(ValueError):
        CountriesClient("")
