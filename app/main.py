"""Entry point for the FastAPI-powered Stremio addon."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, Mapping

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalogs import ADDON_VERSION, build_manifest
from .config import settings
from .services.catalog import CatalogService
from .services.enrichment import EnrichmentService
from .services.omdb import OMDbClient
from .services.rate_limiter import RateLimiter
from .services.tmdb import TMDBClient
from .startup import log_environment, require_tmdb_key, validate_provider_keys
from .utils import parse_extra_segment

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    log_environment(settings)
    require_tmdb_key(settings)

    async with AsyncExitStack() as exit_stack:
        tmdb_http_client = await exit_stack.enter_async_context(
            httpx.AsyncClient(
                base_url=str(settings.tmdb_api_url),
                timeout=httpx.Timeout(15.0, connect=10.0),
            )
        )
        omdb_http_client = await exit_stack.enter_async_context(
            httpx.AsyncClient(
                base_url=str(settings.omdb_api_url),
                timeout=httpx.Timeout(10.0, connect=5.0),
            )
        )

        rate_limiter = RateLimiter(settings.tmdb_min_interval)
        tmdb = TMDBClient(settings, tmdb_http_client, rate_limiter)
        omdb = OMDbClient(settings, omdb_http_client)
        if settings.validate_keys_on_startup:
            await validate_provider_keys(settings, tmdb, omdb)

        enrichment = EnrichmentService(settings, tmdb, omdb)
        fastapi_app.state.catalog_service = CatalogService(settings, tmdb, enrichment)
        logger.info(
            "Add-on ready, manifest at %s/manifest.json", _configured_base() or ""
        )
        yield


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Latest streaming releases for Stremio powered by TMDB and OMDb",
        version=ADDON_VERSION,
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_catalog_service(app: FastAPI) -> CatalogService:
    service = getattr(app.state, "catalog_service", None)
    if not isinstance(service, CatalogService):
        raise RuntimeError("Catalog service not initialised")
    return service


def register_routes(fastapi_app: FastAPI) -> None:
    async def _catalog_endpoint(
        content_type: str,
        catalog_id: str,
        extra: Mapping[str, str],
    ) -> JSONResponse:
        if content_type not in {"movie", "series"}:
            raise HTTPException(status_code=400, detail="Unsupported content type")
        service = get_catalog_service(fastapi_app)
        payload = await service.get_catalog_payload(
            content_type,  # type: ignore[arg-type]
            catalog_id,
            extra,
        )
        return JSONResponse(payload)

    @fastapi_app.get("/")
    async def root(request: Request) -> dict[str, Any]:
        base = _configured_base() or _resolve_external_base(request)
        return {
            "name": settings.app_name,
            "version": ADDON_VERSION,
            "manifest": f"{base}/manifest.json",
            "health": f"{base}/health",
        }

    @fastapi_app.get("/health")
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {
            "status": "ok",
            "version": ADDON_VERSION,
            "environment": settings.environment,
        }

    @fastapi_app.get("/manifest.json")
    async def manifest() -> dict[str, Any]:
        return build_manifest(settings.app_name)

    @fastapi_app.get("/catalog/{content_type}/{catalog_id}.json")
    async def catalog(
        request: Request, content_type: str, catalog_id: str
    ) -> JSONResponse:
        return await _catalog_endpoint(
            content_type, catalog_id, dict(request.query_params)
        )

    @fastapi_app.get("/catalog/{content_type}/{catalog_id}/{extra}.json")
    async def catalog_with_extra(
        request: Request, content_type: str, catalog_id: str, extra: str
    ) -> JSONResponse:
        params = dict(request.query_params)
        params.update(parse_extra_segment(extra))
        return await _catalog_endpoint(content_type, catalog_id, params)


def _configured_base() -> str | None:
    if settings.external_url is None:
        return None
    return str(settings.external_url).rstrip("/")


def _resolve_external_base(request: Request) -> str:
    headers = request.headers
    scheme = _first_forwarded_value(headers.get("x-forwarded-proto")) or request.url.scheme

    host = _first_forwarded_value(headers.get("x-forwarded-host"))
    if not host:
        host_header = headers.get("host")
        host = _first_forwarded_value(host_header) if host_header else None
    if not host:
        host = request.url.netloc

    port = _first_forwarded_value(headers.get("x-forwarded-port"))
    if port and ":" not in host:
        default_port = "443" if scheme == "https" else "80"
        if port != default_port:
            host = f"{host}:{port}"

    origin = f"{scheme}://{host}".rstrip("/")

    prefix = (
        _first_forwarded_value(headers.get("x-forwarded-prefix"))
        or request.scope.get("root_path")
        or ""
    )
    if prefix and not prefix.startswith("/"):
        prefix = f"/{prefix}"
    prefix = prefix.rstrip("/")

    return f"{origin}{prefix}" if prefix else origin


def _first_forwarded_value(header_value: str | None) -> str | None:
    if not header_value:
        return None
    return header_value.split(",", 1)[0].strip()


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
