"""Pydantic models describing catalog queries, provider records and metas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .catalogs import ContentType


class CatalogQuery(BaseModel):
    """Normalized view of a Stremio catalog request."""

    model_config = ConfigDict(frozen=True)

    content_type: ContentType
    page: int = Field(default=1, ge=1)
    genre: str | None = None

    @classmethod
    def from_extra(
        cls,
        content_type: ContentType,
        extra: Mapping[str, str],
        *,
        page_size: int = 20,
    ) -> "CatalogQuery":
        """Build a query from the ``skip``/``genre`` extras sent by Stremio."""

        skip = _coerce_skip(extra.get("skip"))
        genre = (extra.get("genre") or "").strip() or None
        return cls(content_type=content_type, page=skip // page_size + 1, genre=genre)


def _coerce_skip(value: object) -> int:
    if value is None or value == "":
        return 0
    try:
        skip = int(str(value))
    except (TypeError, ValueError):
        return 0
    return max(skip, 0)


class CandidateItem(BaseModel):
    """A discover result returned by TMDB."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    title: str = Field(validation_alias=AliasChoices("title", "name"))
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("release_date", "first_air_date"),
    )
    genre_ids: tuple[int, ...] = ()

    @field_validator("release_date", "overview", "poster_path", "backdrop_path", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("genre_ids", mode="before")
    @classmethod
    def _null_genres(cls, value: object) -> object:
        return value or ()


@dataclass(slots=True)
class StreamingAvailability:
    """Subscription providers offering an item in one region."""

    region: str
    providers: list[str]


@dataclass(slots=True)
class EnrichmentResult:
    """Data gathered from the enrichment lookups for one candidate.

    Every field is optional: a failed lookup leaves its field at the default.
    """

    imdb_id: str | None = None
    streaming: list[StreamingAvailability] = field(default_factory=list)
    rating: float | None = None


class CatalogEntry(BaseModel):
    """Represents a single meta preview returned to Stremio."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: ContentType
    name: str
    poster: str | None = None
    background: str | None = None
    description: str
    release_info: str | None = None
    imdb_rating: float | None = None
    genres: list[str] = Field(default_factory=list)
    imdb_id: str | None = None

    def to_meta(self) -> dict[str, object]:
        """Return a Stremio-compatible meta object for catalog listings."""

        meta: dict[str, object] = {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "poster": self.poster,
            "background": self.background,
            "description": self.description,
            "releaseInfo": self.release_info,
            "genres": list(self.genres),
        }
        if self.imdb_rating is not None:
            meta["imdbRating"] = self.imdb_rating
        if self.type == "series" and self.imdb_id:
            meta["imdb_id"] = self.imdb_id
        return meta
