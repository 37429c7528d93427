"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


from app.config import Settings  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Return a factory building settings with test-friendly defaults."""

    def factory(**overrides: Any) -> Settings:
        base: dict[str, Any] = {
            "TMDB_API_KEY": "tmdb-test-key",
            "OMDB_API_KEY": "omdb-test-key",
            "TMDB_MIN_INTERVAL": 0,
            "TARGET_REGIONS": "US,GB,CA,NZ,AU",
        }
        base.update(overrides)
        return Settings(_env_file=None, **base)  # type: ignore[arg-type]

    return factory
