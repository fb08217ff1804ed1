"""
Query executor - page read plus total count against an item store.
Design: The pipeline depends on the ItemStore protocol only; Elasticsearch and the
SQL repository both implement it.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Protocol

from app.search.filters import ItemFilter
from app.search.sorting import SortSpec


class ItemStore(Protocol):
    """Read interface the discovery pipeline needs from an item store.

    find() returns item documents (see app.search.documents) with owner attached.
    For geospatial filters, find() must return matches ordered by ascending distance
    and sort is None.
    """

    # False when find() and count() cannot run at the same time (e.g. one DB session)
    concurrent_reads: bool

    async def text_index_available(self) -> bool: ...

    async def find(
        self, item_filter: ItemFilter, sort: SortSpec | None, skip: int, limit: int
    ) -> list[dict[str, Any]]: ...

    async def count(self, item_filter: ItemFilter) -> int: ...


@dataclass
class QueryResult:
    items: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0


async def execute_query(
    store: ItemStore,
    item_filter: ItemFilter,
    sort: SortSpec | None,
    page: int,
    limit: int,
) -> QueryResult:
    """Read one page and the total match count. The two reads are not a snapshot."""
    skip = (page - 1) * limit
    if getattr(store, "concurrent_reads", False):
        items, total = await asyncio.gather(
            store.find(item_filter, sort, skip, limit),
            store.count(item_filter),
        )
    else:
        items = await store.find(item_filter, sort, skip, limit)
        total = await store.count(item_filter)
    return QueryResult(items=list(items), total=total)
