"""Client for discovery, detail and watch-provider lookups on The Movie Database (TMDB)."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from ..catalogs import ContentType, genre_filter_id
from ..config import Settings
from ..models import CandidateItem, StreamingAvailability
from ..utils import months_ago
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def tmdb_media_path(content_type: ContentType) -> str:
    return "movie" if content_type == "movie" else "tv"


class TMDBClient:
    """Client responsible for talking to TMDB on behalf of the catalog handler.

    Every request waits for a slot on the shared :class:`RateLimiter`. Lookup
    methods return ``None`` when TMDB cannot answer; ``discover`` returns an
    empty list instead so catalogs still render.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        rate_limiter: RateLimiter,
        *,
        today: Callable[[], date] = date.today,
    ):
        if not settings.tmdb_api_key:
            raise ValueError("TMDB API key is required when initialising TMDBClient")
        self._settings = settings
        self._client = http_client
        self._rate_limiter = rate_limiter
        self._today = today

    async def discover(
        self,
        content_type: ContentType,
        page: int = 1,
        genre: str | None = None,
    ) -> list[CandidateItem]:
        """Return a page of recently released items, newest first."""

        logger.info(
            "Fetching %s data from TMDB (page %s, genre: %s)",
            content_type,
            page,
            genre or "all",
        )
        payload = await self._get_json(
            f"/discover/{tmdb_media_path(content_type)}",
            self._discover_params(content_type, page, genre),
        )
        if payload is None:
            return []

        results = payload.get("results")
        if not isinstance(results, list):
            logger.warning("Unexpected TMDB discover payload for %s", content_type)
            return []

        candidates: list[CandidateItem] = []
        for record in results:
            if not isinstance(record, dict):
                continue
            try:
                candidates.append(CandidateItem.model_validate(record))
            except ValidationError:
                logger.debug("Skipping malformed TMDB record %s", record.get("id"))
        logger.info("Fetched %s items from TMDB", len(candidates))
        return candidates

    def _discover_params(
        self, content_type: ContentType, page: int, genre: str | None
    ) -> dict[str, Any]:
        since = months_ago(self._today(), self._settings.recent_months).isoformat()
        params: dict[str, Any] = {
            "page": page,
            "region": self._settings.primary_region,
            "vote_count.gte": self._settings.min_vote_count,
        }
        if content_type == "movie":
            params["sort_by"] = "primary_release_date.desc"
            params["primary_release_date.gte"] = since
        else:
            params["sort_by"] = "first_air_date.desc"
            params["first_air_date.gte"] = since
        if self._settings.original_language:
            params["with_original_language"] = self._settings.original_language

        genre_id = genre_filter_id(genre)
        if genre_id is not None:
            params["with_genres"] = genre_id
        elif genre:
            logger.info("Ignoring unrecognised genre filter %r", genre)
        return params

    async def fetch_external_ids(
        self, tmdb_id: int, content_type: ContentType
    ) -> dict[str, Any] | None:
        """Fetch external IDs for a TMDB entity."""

        payload = await self._get_json(
            f"/{tmdb_media_path(content_type)}/{tmdb_id}",
            {"append_to_response": "external_ids"},
        )
        if payload is None:
            return None
        external = payload.get("external_ids") or {}
        data = {
            "imdb_id": external.get("imdb_id") or payload.get("imdb_id"),
            "tvdb_id": external.get("tvdb_id"),
        }
        return {key: value for key, value in data.items() if value}

    async def fetch_streaming_availability(
        self, tmdb_id: int, content_type: ContentType
    ) -> list[StreamingAvailability] | None:
        """Return subscription ("flatrate") providers per configured region."""

        payload = await self._get_json(
            f"/{tmdb_media_path(content_type)}/{tmdb_id}/watch/providers", {}
        )
        if payload is None:
            return None
        regions = payload.get("results")
        if not isinstance(regions, dict):
            return []

        availability: list[StreamingAvailability] = []
        for region in self._settings.target_regions:
            offers = regions.get(region) or {}
            flatrate = offers.get("flatrate") if isinstance(offers, dict) else None
            if not flatrate:
                continue
            providers = [
                str(entry["provider_name"])
                for entry in flatrate
                if isinstance(entry, dict) and entry.get("provider_name")
            ]
            if providers:
                availability.append(
                    StreamingAvailability(region=region, providers=providers)
                )
        return availability

    async def validate_key(self) -> bool:
        """Check the configured API key against the configuration endpoint."""

        return await self._get_json("/configuration", {}) is not None

    async def _get_json(
        self, path: str, params: dict[str, Any]
    ) -> dict[str, Any] | None:
        await self._rate_limiter.wait_for_slot()
        query = {**params, "api_key": self._settings.tmdb_api_key}
        try:
            response = await self._client.get(path, params=query)
        except httpx.HTTPError as exc:
            logger.warning("TMDB request to %s failed: %s", path, exc)
            return None
        if response.status_code >= 400:
            logger.warning(
                "TMDB request to %s failed (%s): %s",
                path,
                response.status_code,
                _status_message(response),
            )
            return None
        try:
            data = response.json()
        except ValueError:
            logger.warning("Unexpected non-JSON TMDB response for %s", path)
            return None
        if not isinstance(data, dict):
            logger.warning("Unexpected TMDB response structure for %s", path)
            return None
        return data


def _status_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict) and data.get("status_message"):
        return str(data["status_message"])
    return response.text
