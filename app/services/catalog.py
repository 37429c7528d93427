"""Orchestration of catalog requests: discovery, enrichment and formatting."""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Mapping

from ..catalogs import ContentType, find_catalog
from ..config import Settings
from ..models import CatalogEntry, CatalogQuery
from .enrichment import EnrichmentService
from .formatter import build_catalog_entry
from .tmdb import TMDBClient

logger = logging.getLogger(__name__)

PROGRESS_LOG_EVERY = 5


class RunState(str, enum.Enum):
    STARTED = "started"
    DISCOVERING = "discovering"
    ENRICHING = "enriching"
    FORMATTING = "formatting"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"


@dataclass(slots=True)
class CatalogRun:
    """Progress of a single catalog request.

    ``entries`` only ever holds fully formatted metas, so a run stopped by
    the deadline still has a usable result.
    """

    query: CatalogQuery
    state: RunState = RunState.STARTED
    item_index: int | None = None
    candidate_count: int = 0
    entries: list[CatalogEntry] = field(default_factory=list)
    started_at: float = field(default_factory=time.monotonic)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def to_payload(self) -> dict[str, object]:
        return {"metas": [entry.to_meta() for entry in self.entries]}


class CatalogService:
    """Serve Stremio catalog requests under a global deadline."""

    def __init__(
        self,
        settings: Settings,
        tmdb: TMDBClient,
        enrichment: EnrichmentService,
    ):
        self._settings = settings
        self._tmdb = tmdb
        self._enrichment = enrichment

    async def get_catalog_payload(
        self,
        content_type: ContentType,
        catalog_id: str,
        extra: Mapping[str, str] | None = None,
    ) -> dict[str, object]:
        """Return the ``{"metas": [...]}`` payload for a catalog request."""

        definition = find_catalog(catalog_id)
        if definition is None or definition.content_type != content_type:
            logger.warning(
                "Unknown catalog %s requested for type %s", catalog_id, content_type
            )
            return {"metas": []}

        query = CatalogQuery.from_extra(
            content_type, extra or {}, page_size=self._settings.catalog_page_size
        )
        run = await self.run(query)
        return run.to_payload()

    async def run(self, query: CatalogQuery) -> CatalogRun:
        """Execute a catalog run, returning whatever completed before the deadline."""

        run = CatalogRun(query=query)
        logger.info(
            "Handling %s catalog request (page %s, genre: %s)",
            query.content_type,
            query.page,
            query.genre or "all",
        )
        try:
            await asyncio.wait_for(
                self._execute(run), timeout=self._settings.catalog_deadline
            )
        except asyncio.TimeoutError:
            run.state = RunState.TIMED_OUT
            logger.error(
                "Request timeout for %s catalog after %.1fs, returning %s items",
                query.content_type,
                run.elapsed,
                len(run.entries),
            )
        except Exception:
            run.state = RunState.COMPLETED
            logger.exception(
                "Critical error in %s catalog handler", query.content_type
            )
        return run

    async def _execute(self, run: CatalogRun) -> None:
        query = run.query
        run.state = RunState.DISCOVERING
        candidates = await self._tmdb.discover(
            query.content_type, query.page, query.genre
        )
        if not candidates:
            logger.info("No content found for %s catalog", query.content_type)
            run.state = RunState.COMPLETED
            return

        selected = candidates[: self._settings.catalog_item_cap]
        run.candidate_count = len(selected)
        logger.info("Converting %s items to Stremio format", len(selected))

        for index, candidate in enumerate(selected):
            run.state = RunState.ENRICHING
            run.item_index = index
            try:
                enrichment = await self._enrichment.enrich(
                    candidate, query.content_type
                )
                run.state = RunState.FORMATTING
                entry = build_catalog_entry(
                    candidate,
                    enrichment,
                    query.content_type,
                    image_base_url=self._settings.tmdb_image_base_url,
                )
            except Exception:
                logger.exception("Error processing item %s", candidate.id)
                continue
            run.entries.append(entry)
            if (index + 1) % PROGRESS_LOG_EVERY == 0:
                logger.info("Processed %s/%s items", index + 1, len(selected))

        run.state = RunState.COMPLETED
        run.item_index = None
        logger.info(
            "Catalog request completed in %.0fms, returning %s items",
            run.elapsed * 1000,
            len(run.entries),
        )
