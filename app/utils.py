"""Utility helpers for the Latest Streaming Releases service."""

from __future__ import annotations

import calendar
from datetime import date
from urllib.parse import parse_qsl


def months_ago(today: date, months: int) -> date:
    """Return ``today`` shifted back by whole calendar months.

    The day is clamped to the length of the target month, so 31 May minus
    three months is 28 (or 29) February.
    """

    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(today.day, last_day))


def build_image_url(path: str | None, base_url: str) -> str | None:
    """Join a TMDB image path onto the configured image base URL."""

    if not path:
        return None
    if path.startswith("http"):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def mask_secret(value: str | None, visible: int = 8) -> str:
    """Return a log-safe rendering of an API key."""

    if not value:
        return "missing"
    return f"set ({value[:visible]}...)"


def parse_extra_segment(segment: str | None) -> dict[str, str]:
    """Parse the ``skip=20&genre=Horror`` path segment Stremio appends to catalogs."""

    if not segment:
        return {}
    return dict(parse_qsl(segment, keep_blank_values=True))
