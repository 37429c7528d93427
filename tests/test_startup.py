"""Startup validation: the add-on must refuse to serve without a working TMDB key."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

import app.main as main_module
import latest_releases.__main__ as entrypoint
from app.services.omdb import OMDbClient
from app.services.rate_limiter import RateLimiter
from app.services.tmdb import TMDBClient
from app.startup import StartupError, require_tmdb_key, validate_provider_keys


def _handler(tmdb_status: int, omdb_payload: dict):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "ratings.example.com":
            return httpx.Response(200, json=omdb_payload)
        return httpx.Response(tmdb_status, json={"status_message": "Invalid API key"})

    return handler


async def _validate(settings, handler) -> None:
    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(
        transport=transport, base_url="https://api.example.com/3"
    ) as tmdb_http, httpx.AsyncClient(
        transport=transport, base_url="https://ratings.example.com"
    ) as omdb_http:
        await validate_provider_keys(
            settings,
            TMDBClient(settings, tmdb_http, RateLimiter(0)),
            OMDbClient(settings, omdb_http),
        )


def test_require_tmdb_key_rejects_missing_key(make_settings) -> None:
    with pytest.raises(StartupError, match="TMDB_API_KEY"):
        require_tmdb_key(make_settings(TMDB_API_KEY=""))


@pytest.mark.anyio("asyncio")
async def test_rejected_tmdb_key_is_fatal(make_settings) -> None:
    with pytest.raises(StartupError, match="validation failed"):
        await _validate(make_settings(), _handler(401, {}))


@pytest.mark.anyio("asyncio")
async def test_rejected_omdb_key_only_disables_ratings(make_settings) -> None:
    await _validate(
        make_settings(),
        _handler(200, {"Response": "False", "Error": "Invalid API key!"}),
    )


@pytest.mark.anyio("asyncio")
async def test_missing_omdb_key_is_not_fatal(make_settings) -> None:
    await _validate(make_settings(OMDB_API_KEY=""), _handler(200, {}))


def test_lifespan_refuses_to_start_without_tmdb_key(monkeypatch, make_settings) -> None:
    monkeypatch.setattr(main_module, "settings", make_settings(TMDB_API_KEY=""))

    with pytest.raises(StartupError):
        with TestClient(main_module.create_app()):
            pass


def test_entrypoint_exits_before_serving_without_tmdb_key(monkeypatch, make_settings) -> None:
    served: list[object] = []
    monkeypatch.setattr(entrypoint, "settings", make_settings(TMDB_API_KEY=""))
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda *args, **kwargs: served.append(args))

    with pytest.raises(SystemExit) as exc_info:
        entrypoint.main()

    assert exc_info.value.code == 1
    assert served == []
