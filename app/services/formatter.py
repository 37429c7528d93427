"""Projection of TMDB candidates and enrichment data into Stremio metas."""

from __future__ import annotations

from typing import Sequence

from ..catalogs import REGION_NAMES, ContentType, resolve_genre_names
from ..models import CandidateItem, CatalogEntry, EnrichmentResult, StreamingAvailability
from ..utils import build_image_url

DEFAULT_DESCRIPTION = "No description available."
STREAMING_HEADER = "\n\n🎬 Available on:\n"


def compose_description(
    overview: str | None,
    streaming: Sequence[StreamingAvailability],
    rating: float | None,
) -> str:
    """Build the description text shown on the Stremio detail page."""

    description = overview or DEFAULT_DESCRIPTION
    if streaming:
        description += STREAMING_HEADER
        for entry in streaming:
            region_name = REGION_NAMES.get(entry.region, entry.region)
            description += f"{region_name}: {', '.join(entry.providers)}\n"
    if rating is not None:
        description += f"\n⭐ IMDB Rating: {rating:.1f}/10"
    return description


def build_catalog_entry(
    candidate: CandidateItem,
    enrichment: EnrichmentResult,
    content_type: ContentType,
    *,
    image_base_url: str,
) -> CatalogEntry:
    return CatalogEntry(
        id=f"tmdb:{candidate.id}",
        type=content_type,
        name=candidate.title,
        poster=build_image_url(candidate.poster_path, image_base_url),
        background=build_image_url(candidate.backdrop_path, image_base_url),
        description=compose_description(
            candidate.overview, enrichment.streaming, enrichment.rating
        ),
        release_info=candidate.release_date,
        imdb_rating=enrichment.rating,
        genres=resolve_genre_names(list(candidate.genre_ids)),
        imdb_id=enrichment.imdb_id if content_type == "series" else None,
    )
