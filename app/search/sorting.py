"""
Sort resolution for discovery results.
Unknown keys resolve to "recent"; geospatial queries keep the store's proximity order.
"""

import enum
import logging
from dataclasses import dataclass

from app.search.text import TextPlan

logger = logging.getLogger(__name__)


class SortKey(str, enum.Enum):
    RECENT = "recent"
    OLDEST = "oldest"
    TITLE = "title"
    RELEVANCE = "relevance"


class SortField(str, enum.Enum):
    CREATED_AT = "created_at"
    TITLE = "title"
    RELEVANCE = "relevance"


@dataclass(frozen=True)
class SortSpec:
    """Concrete ordering. Stores add the item id as a tie-breaker in the same direction."""

    field: SortField
    descending: bool


RECENT = SortSpec(SortField.CREATED_AT, descending=True)

_ORDERINGS = {
    SortKey.RECENT: RECENT,
    SortKey.OLDEST: SortSpec(SortField.CREATED_AT, descending=False),
    SortKey.TITLE: SortSpec(SortField.TITLE, descending=False),
    SortKey.RELEVANCE: SortSpec(SortField.RELEVANCE, descending=True),
}


def parse_sort_key(key: str | None) -> SortKey:
    try:
        return SortKey((key or SortKey.RECENT.value).strip().lower())
    except ValueError:
        logger.info("Unknown sort key %r, using %s", key, SortKey.RECENT.value)
        return SortKey.RECENT


def resolve_sort(key: str | None, *, geospatial: bool, text_plan: TextPlan) -> SortSpec | None:
    """Return the ordering to apply, or None when proximity order is authoritative."""
    if geospatial:
        return None
    sort_key = parse_sort_key(key)
    if sort_key is SortKey.RELEVANCE and not text_plan.supports_relevance:
        return RECENT
    return _ORDERINGS[sort_key]
