"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Iterable, Literal

from pydantic import AliasChoices, Field, HttpUrl, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .catalogs import REGION_NAMES


DEFAULT_TARGET_REGIONS: tuple[str, ...] = tuple(REGION_NAMES)


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Latest Streaming Releases", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    omdb_api_key: str | None = Field(default=None, alias="OMDB_API_KEY")

    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500", alias="TMDB_IMAGE_BASE_URL"
    )
    omdb_api_url: HttpUrl = Field(
        default="http://www.omdbapi.com", alias="OMDB_API_URL"
    )
    external_url: HttpUrl | None = Field(
        default=None,
        alias="EXTERNAL_URL",
        validation_alias=AliasChoices("EXTERNAL_URL", "RENDER_EXTERNAL_URL"),
    )

    target_regions: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_TARGET_REGIONS, alias="TARGET_REGIONS"
    )

    tmdb_min_interval: float = Field(default=0.3, alias="TMDB_MIN_INTERVAL", ge=0)
    catalog_deadline: float = Field(default=30.0, alias="CATALOG_DEADLINE", gt=0)
    catalog_item_cap: int = Field(default=15, alias="CATALOG_ITEM_CAP", ge=1, le=20)
    catalog_page_size: int = Field(default=20, alias="CATALOG_PAGE_SIZE", ge=1)
    detail_timeout: float = Field(default=10.0, alias="DETAIL_TIMEOUT", gt=0)
    streaming_timeout: float = Field(default=5.0, alias="STREAMING_TIMEOUT", gt=0)
    rating_timeout: float = Field(default=3.0, alias="RATING_TIMEOUT", gt=0)

    recent_months: int = Field(default=3, alias="RECENT_MONTHS", ge=1, le=24)
    min_vote_count: int = Field(default=10, alias="MIN_VOTE_COUNT", ge=0)
    original_language: str | None = Field(default="en", alias="ORIGINAL_LANGUAGE")

    validate_keys_on_startup: bool = Field(
        default=True, alias="VALIDATE_KEYS_ON_STARTUP"
    )

    environment: Literal["development", "production"] = Field(
        default="development",
        alias="ENVIRONMENT",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )

    @field_validator("target_regions", mode="before")
    @classmethod
    def _parse_target_regions(cls, value: object) -> tuple[str, ...]:
        """Normalise region selections from environment values."""

        if value is None:
            return DEFAULT_TARGET_REGIONS
        if isinstance(value, str):
            raw_values = [part.strip() for part in value.split(",")]
        elif isinstance(value, Iterable):
            raw_values = [str(part).strip() for part in value]
        else:
            raise TypeError("TARGET_REGIONS must be a string or iterable of strings")

        cleaned: list[str] = []
        for entry in raw_values:
            code = entry.upper()
            if not code:
                continue
            if len(code) != 2 or not code.isalpha():
                raise ValueError("Target regions must be two-letter country codes")
            if code not in cleaned:
                cleaned.append(code)
        if not cleaned:
            return DEFAULT_TARGET_REGIONS
        return tuple(cleaned)

    @field_validator("tmdb_api_key", "omdb_api_key", "original_language", mode="before")
    @classmethod
    def _strip_blank(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return value

    @model_validator(mode="after")
    def _check_sub_deadlines(self) -> "Settings":
        """Ensure every per-call timeout fits inside the catalog deadline."""

        for name in ("detail_timeout", "streaming_timeout", "rating_timeout"):
            if getattr(self, name) >= self.catalog_deadline:
                raise ValueError(
                    f"{name.upper()} must be shorter than CATALOG_DEADLINE"
                )
        return self

    @property
    def primary_region(self) -> str:
        """Return the region used to scope discovery queries."""

        return self.target_regions[0]

    @property
    def ratings_enabled(self) -> bool:
        return bool(self.omdb_api_key)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
