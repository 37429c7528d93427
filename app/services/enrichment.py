"""Per-item enrichment with external ids, streaming availability and ratings."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from ..catalogs import ContentType
from ..config import Settings
from ..models import CandidateItem, EnrichmentResult
from .omdb import OMDbClient
from .tmdb import TMDBClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EnrichmentService:
    """Run the three enrichment lookups for a candidate, one after another.

    Each lookup has its own timeout. On expiry the pending request is
    cancelled and the lookup falls back to its empty value; no lookup failure
    stops the others.
    """

    def __init__(self, settings: Settings, tmdb: TMDBClient, omdb: OMDbClient):
        self._settings = settings
        self._tmdb = tmdb
        self._omdb = omdb

    async def enrich(
        self, candidate: CandidateItem, content_type: ContentType
    ) -> EnrichmentResult:
        result = EnrichmentResult()

        external_ids = await self._bounded(
            self._tmdb.fetch_external_ids(candidate.id, content_type),
            timeout=self._settings.detail_timeout,
            label=f"detail lookup for {candidate.id}",
        )
        if external_ids:
            result.imdb_id = external_ids.get("imdb_id")

        streaming = await self._bounded(
            self._tmdb.fetch_streaming_availability(candidate.id, content_type),
            timeout=self._settings.streaming_timeout,
            label=f"streaming availability for {candidate.id}",
        )
        if streaming:
            result.streaming = streaming

        if result.imdb_id and self._omdb.enabled:
            result.rating = await self._bounded(
                self._omdb.fetch_rating(result.imdb_id),
                timeout=self._settings.rating_timeout,
                label=f"rating for {result.imdb_id}",
            )

        return result

    @staticmethod
    async def _bounded(
        operation: Awaitable[T | None], *, timeout: float, label: str
    ) -> T | None:
        try:
            return await asyncio.wait_for(operation, timeout=timeout)
        except asyncio.TimeoutError:
            logger.info("Timed out after %.1fs waiting for %s", timeout, label)
            return None
        except Exception:  # pragma: no cover - defensive logging branch
            logger.exception("Unexpected failure during %s", label)
            return None
