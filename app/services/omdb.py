"""Client for IMDb ratings served by the OMDb API."""

from __future__ import annotations

import logging

import httpx

from ..config import Settings

logger = logging.getLogger(__name__)

# The Shawshank Redemption; always present, so a failed lookup means a bad key.
VALIDATION_IMDB_ID = "tt0111161"


class OMDbClient:
    """Thin wrapper around the OMDb lookup-by-id endpoint."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    @property
    def enabled(self) -> bool:
        return self._settings.ratings_enabled

    async def fetch_rating(self, imdb_id: str | None) -> float | None:
        """Return the IMDb rating for ``imdb_id`` or ``None`` when unavailable."""

        if not (self.enabled and imdb_id):
            return None
        payload = await self._lookup(imdb_id)
        if payload is None:
            return None
        return _parse_rating(payload.get("imdbRating"))

    async def validate_key(self) -> bool:
        """Check the configured API key with a lookup that must succeed."""

        if not self.enabled:
            return False
        return await self._lookup(VALIDATION_IMDB_ID) is not None

    async def _lookup(self, imdb_id: str) -> dict[str, object] | None:
        params = {"i": imdb_id, "apikey": self._settings.omdb_api_key}
        try:
            response = await self._client.get("/", params=params)
        except httpx.HTTPError as exc:
            logger.warning("OMDb lookup for %s failed: %s", imdb_id, exc)
            return None
        if response.status_code >= 400:
            logger.warning(
                "OMDb lookup for %s failed (%s): %s",
                imdb_id,
                response.status_code,
                response.text,
            )
            return None
        try:
            data = response.json()
        except ValueError:
            logger.warning("Unexpected non-JSON OMDb response for %s", imdb_id)
            return None
        if not isinstance(data, dict):
            return None
        # OMDb reports missing titles and key problems with HTTP 200 payloads.
        if data.get("Error") or str(data.get("Response", "True")).lower() == "false":
            logger.debug("OMDb returned an error for %s: %s", imdb_id, data.get("Error"))
            return None
        return data


def _parse_rating(value: object) -> float | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.upper() == "N/A":
        return None
    try:
        return float(text)
    except ValueError:
        return None
