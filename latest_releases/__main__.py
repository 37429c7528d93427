"""Module executed when running ``python -m latest_releases``."""

from __future__ import annotations

import logging
import sys

import uvicorn

from app.config import settings
from app.startup import StartupError, require_tmdb_key

logger = logging.getLogger("latest_releases")


def main() -> None:
    """Start the uvicorn server, refusing to start without a TMDB key."""

    logging.basicConfig(level=settings.log_level.upper())
    try:
        require_tmdb_key(settings)
    except StartupError as exc:
        logger.error("Cannot start server: %s", exc)
        sys.exit(1)

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    main()
