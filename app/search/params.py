"""
Search parameter normalization.
Challenge: Query strings are loosely typed; bad input must degrade to safe defaults, never to 4xx.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class SearchConfig:
    """Pipeline defaults, passed in at construction time."""

    default_page_size: int = 12
    max_page_size: int = 100
    default_radius_km: int = 10
    default_sort: str = "recent"


@dataclass(frozen=True)
class SearchParams:
    """Typed, bounds-checked search request. page, limit and radius_km are always >= 1."""

    q: str | None = None
    category: str | None = None
    condition: str | None = None
    location: str | None = None
    lat: float | None = None
    lng: float | None = None
    radius_km: int = 10
    sort: str = "recent"
    page: int = 1
    limit: int = 12

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def parse_int(value: str | None) -> int | None:
    """Lenient integer parse: "12" -> 12, "12.9" -> 12, "abc" -> None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def parse_float(value: str | None) -> float | None:
    """Float parse that rejects empty, NaN and infinite values."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_or(value: int | None, default: int) -> int:
    return value if value is not None and value >= 1 else default


def normalize_params(raw: Mapping[str, str | None], config: SearchConfig) -> SearchParams:
    """Turn raw query parameters into SearchParams. Pure; never raises on bad input."""
    limit = _positive_or(parse_int(raw.get("limit")), config.default_page_size)
    return SearchParams(
        q=_clean_text(raw.get("q")),
        category=_clean_text(raw.get("category")),
        condition=_clean_text(raw.get("condition")),
        location=_clean_text(raw.get("location")),
        lat=parse_float(raw.get("lat")),
        lng=parse_float(raw.get("lng")),
        radius_km=_positive_or(parse_int(raw.get("distance")), config.default_radius_km),
        sort=_clean_text(raw.get("sort")) or config.default_sort,
        page=_positive_or(parse_int(raw.get("page")), 1),
        limit=min(limit, config.max_page_size),
    )
