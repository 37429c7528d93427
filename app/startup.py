"""Fail-fast validation of provider credentials before the add-on serves traffic."""

from __future__ import annotations

import logging

from .config import Settings
from .services.omdb import OMDbClient
from .services.tmdb import TMDBClient
from .utils import mask_secret

logger = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the process must not start serving requests."""


def log_environment(settings: Settings) -> None:
    logger.info("Environment check:")
    logger.info("  ENVIRONMENT: %s", settings.environment)
    logger.info("  PORT: %s", settings.server_port)
    logger.info("  TARGET_REGIONS: %s", ",".join(settings.target_regions))
    logger.info("  TMDB_API_KEY: %s", mask_secret(settings.tmdb_api_key))
    logger.info("  OMDB_API_KEY: %s", mask_secret(settings.omdb_api_key))


def require_tmdb_key(settings: Settings) -> None:
    if not settings.tmdb_api_key:
        raise StartupError(
            "TMDB_API_KEY environment variable is required "
            "(get one at https://www.themoviedb.org/settings/api)"
        )


async def validate_provider_keys(
    settings: Settings, tmdb: TMDBClient, omdb: OMDbClient
) -> None:
    """Validate API keys with live calls.

    A missing or rejected TMDB key raises :class:`StartupError`. OMDb is
    optional: problems with it only disable ratings.
    """

    require_tmdb_key(settings)

    logger.info("Testing TMDB API key...")
    if not await tmdb.validate_key():
        raise StartupError("TMDB API key validation failed")
    logger.info("TMDB API key is valid")

    if not omdb.enabled:
        logger.warning("OMDb API key not provided - IMDB ratings will be disabled")
        return
    logger.info("Testing OMDb API key...")
    if await omdb.validate_key():
        logger.info("OMDb API key is valid")
    else:
        logger.warning("OMDb API key validation failed - ratings may be unavailable")
