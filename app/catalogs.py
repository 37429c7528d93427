"""Catalog definitions, manifest descriptor and static TMDB lookup tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


ContentType = Literal["movie", "series"]

ADDON_ID = "com.lateststreaming.addon"
ADDON_VERSION = "1.0.0"
ADDON_DESCRIPTION = (
    "Discover the latest TV series and movies released on streaming platforms "
    "in USA, UK, Canada, New Zealand and Australia"
)
ADDON_LOGO = "https://via.placeholder.com/256x256/007acc/ffffff?text=LSR"
ADDON_BACKGROUND = (
    "https://via.placeholder.com/1920x1080/1a1a1a/ffffff?text=Latest+Streaming"
)

# Genre names offered to Stremio and the TMDB genre ids they filter on.
GENRE_FILTERS: dict[str, int] = {
    "Action": 28,
    "Comedy": 35,
    "Drama": 18,
    "Horror": 27,
    "Romance": 10749,
    "Thriller": 53,
    "Sci-Fi": 878,
}
GENRE_OPTIONS: tuple[str, ...] = tuple(GENRE_FILTERS)

TMDB_GENRE_NAMES: dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}

REGION_NAMES: dict[str, str] = {
    "US": "United States",
    "GB": "United Kingdom",
    "CA": "Canada",
    "NZ": "New Zealand",
    "AU": "Australia",
}


@dataclass(frozen=True)
class CatalogDefinition:
    """Describes a fixed catalog lane shown in Stremio."""

    id: str
    name: str
    content_type: ContentType

    def to_manifest_entry(self) -> dict[str, object]:
        return {
            "type": self.content_type,
            "id": self.id,
            "name": self.name,
            "extra": [
                {"name": "skip", "isRequired": False},
                {
                    "name": "genre",
                    "isRequired": False,
                    "options": list(GENRE_OPTIONS),
                },
            ],
        }


CATALOGS: tuple[CatalogDefinition, ...] = (
    CatalogDefinition(id="latest-movies", name="Latest Movies", content_type="movie"),
    CatalogDefinition(
        id="latest-series", name="Latest TV Series", content_type="series"
    ),
)


def find_catalog(catalog_id: str) -> CatalogDefinition | None:
    """Return the catalog definition registered under ``catalog_id``."""

    for definition in CATALOGS:
        if definition.id == catalog_id:
            return definition
    return None


def genre_filter_id(genre: str | None) -> int | None:
    """Map a Stremio genre option to its TMDB id; unknown names map to ``None``."""

    if not genre:
        return None
    return GENRE_FILTERS.get(genre)


def resolve_genre_names(genre_ids: list[int]) -> list[str]:
    """Translate TMDB genre ids to names, silently dropping unknown ids."""

    names: list[str] = []
    for genre_id in genre_ids:
        name = TMDB_GENRE_NAMES.get(genre_id)
        if name:
            names.append(name)
    return names


def build_manifest(app_name: str | None = None) -> dict[str, object]:
    """Return the Stremio manifest describing the add-on."""

    return {
        "id": ADDON_ID,
        "version": ADDON_VERSION,
        "name": app_name or "Latest Streaming Releases",
        "description": ADDON_DESCRIPTION,
        "logo": ADDON_LOGO,
        "background": ADDON_BACKGROUND,
        "resources": ["catalog"],
        "types": ["movie", "series"],
        "idPrefixes": ["tmdb"],
        "catalogs": [definition.to_manifest_entry() for definition in CATALOGS],
    }
