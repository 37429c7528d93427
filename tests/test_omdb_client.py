"""Tests for the OMDb rating lookups."""

from __future__ import annotations

import httpx
import pytest

from app.services.omdb import OMDbClient


async def _fetch(make_settings, handler, imdb_id: str | None = "tt1234567", **overrides):
    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(
        transport=transport, base_url="https://ratings.example.com"
    ) as http_client:
        client = OMDbClient(make_settings(**overrides), http_client)
        return await client.fetch_rating(imdb_id)


@pytest.mark.anyio("asyncio")
async def test_fetch_rating_parses_imdb_rating(make_settings) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"Title": "Arrival", "imdbRating": "7.9", "Response": "True"})

    rating = await _fetch(make_settings, handler)

    assert rating == pytest.approx(7.9)
    assert requests[0].url.params["i"] == "tt1234567"
    assert requests[0].url.params["apikey"] == "omdb-test-key"


@pytest.mark.anyio("asyncio")
async def test_fetch_rating_treats_not_available_as_missing(make_settings) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"imdbRating": "N/A", "Response": "True"})

    assert await _fetch(make_settings, handler) is None


@pytest.mark.anyio("asyncio")
async def test_fetch_rating_handles_not_found_payload(make_settings) -> None:
    """OMDb signals unknown ids with an HTTP 200 error payload."""

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"Response": "False", "Error": "Incorrect IMDb ID."})

    assert await _fetch(make_settings, handler) is None


@pytest.mark.anyio("asyncio")
async def test_fetch_rating_handles_quota_errors(make_settings) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"Response": "False", "Error": "Request limit reached!"})

    assert await _fetch(make_settings, handler) is None


@pytest.mark.anyio("asyncio")
async def test_fetch_rating_handles_transport_errors(make_settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    assert await _fetch(make_settings, handler) is None


@pytest.mark.anyio("asyncio")
async def test_fetch_rating_skips_request_without_key_or_id(make_settings) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"imdbRating": "8.0"})

    assert await _fetch(make_settings, handler, OMDB_API_KEY="") is None
    assert await _fetch(make_settings, handler, imdb_id=None) is None
    assert requests == []


@pytest.mark.anyio("asyncio")
async def test_validate_key_reports_rejected_key(make_settings) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"Response": "False", "Error": "Invalid API key!"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(
        transport=transport, base_url="https://ratings.example.com"
    ) as http_client:
        client = OMDbClient(make_settings(), http_client)
        assert await client.validate_key() is False
