"""Tests for shaping enriched candidates into Stremio metas."""

from __future__ import annotations

from app.models import CandidateItem, EnrichmentResult, StreamingAvailability
from app.services.formatter import build_catalog_entry, compose_description

IMAGE_BASE = "https://image.tmdb.org/t/p/w500"


def test_compose_description_with_streaming_and_rating() -> None:
    description = compose_description(
        "Two strangers share a lighthouse.",
        [
            StreamingAvailability(region="US", providers=["Netflix", "Hulu"]),
            StreamingAvailability(region="NZ", providers=["Neon"]),
        ],
        7.0,
    )

    assert description == (
        "Two strangers share a lighthouse."
        "\n\n🎬 Available on:\n"
        "United States: Netflix, Hulu\n"
        "New Zealand: Neon\n"
        "\n⭐ IMDB Rating: 7.0/10"
    )


def test_compose_description_without_enrichment() -> None:
    assert compose_description("Plain overview.", [], None) == "Plain overview."
    assert compose_description(None, [], None) == "No description available."


def test_compose_description_rating_only() -> None:
    assert compose_description("", [], 6.46) == (
        "No description available.\n⭐ IMDB Rating: 6.5/10"
    )


def test_compose_description_unknown_region_uses_code() -> None:
    description = compose_description(
        "Overview", [StreamingAvailability(region="IE", providers=["RTE Player"])], None
    )

    assert description.endswith("IE: RTE Player\n")


def test_build_movie_entry_projects_candidate_fields() -> None:
    candidate = CandidateItem(
        id=101,
        title="Night Shift",
        overview="A haunted hospital.",
        poster_path="/poster.jpg",
        backdrop_path=None,
        release_date="2024-05-20",
        genre_ids=(27, 99999, 53),
    )
    enrichment = EnrichmentResult(imdb_id="tt0101010", rating=5.5)

    entry = build_catalog_entry(candidate, enrichment, "movie", image_base_url=IMAGE_BASE)
    meta = entry.to_meta()

    assert meta["id"] == "tmdb:101"
    assert meta["type"] == "movie"
    assert meta["name"] == "Night Shift"
    assert meta["poster"] == "https://image.tmdb.org/t/p/w500/poster.jpg"
    assert meta["background"] is None
    assert meta["releaseInfo"] == "2024-05-20"
    assert meta["imdbRating"] == 5.5
    assert meta["genres"] == ["Horror", "Thriller"]
    assert "imdb_id" not in meta


def test_build_series_entry_carries_imdb_id() -> None:
    candidate = CandidateItem.model_validate(
        {"id": 7, "name": "Harbour Lights", "first_air_date": "2024-04-02"}
    )
    enrichment = EnrichmentResult(imdb_id="tt0000007")

    meta = build_catalog_entry(
        candidate, enrichment, "series", image_base_url=IMAGE_BASE
    ).to_meta()

    assert meta["imdb_id"] == "tt0000007"
    assert "imdbRating" not in meta
    assert meta["description"] == "No description available."
    assert meta["genres"] == []
