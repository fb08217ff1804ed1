"""
Discovery engine - turns raw query parameters into one ranked, paginated result set.
Challenge: Merge text, filters, geo radius, distance and sorting; degrade instead of failing
when an optional input is missing or malformed.
Design: Stateless per request; all state lives in the item store.
"""

import logging
import time
from collections.abc import Mapping

from app.core.errors import SearchBackendError
from app.schemas.search import SearchResponse
from app.search.distance import annotate_distances
from app.search.executor import ItemStore, execute_query
from app.search.filters import FilterBuilder
from app.search.geo import build_geo_clause
from app.search.metrics import SEARCH_FAILURES, SEARCH_LATENCY, SEARCH_REQUESTS
from app.search.params import SearchConfig, SearchParams, normalize_params
from app.search.response import assemble_response
from app.search.sorting import resolve_sort
from app.search.text import choose_text_clause

logger = logging.getLogger(__name__)


class DiscoveryEngine:
    """Runs the search pipeline against one item store."""

    def __init__(self, store: ItemStore, config: SearchConfig | None = None):
        self.store = store
        self.config = config or SearchConfig()

    async def search(self, raw_params: Mapping[str, str | None]) -> SearchResponse:
        """Normalize raw (string) params, then run the pipeline."""
        return await self.search_params(normalize_params(raw_params, self.config))

    async def search_params(self, params: SearchParams) -> SearchResponse:
        started = time.perf_counter()
        try:
            response = await self._run(params)
        except SearchBackendError:
            SEARCH_FAILURES.inc()
            raise
        SEARCH_LATENCY.observe(time.perf_counter() - started)
        return response

    async def _run(self, params: SearchParams) -> SearchResponse:
        # Only probe the store for a text index when there is text to search
        index_ready = bool(params.q) and await self.store.text_index_available()
        text_plan = choose_text_clause(params.q, index_ready)
        geo = build_geo_clause(params.lat, params.lng, params.radius_km)

        item_filter = (
            FilterBuilder()
            .add(text_plan.clause)
            .category(params.category)
            .condition(params.condition)
            .location(params.location)
            .add(geo)
            .build()
        )
        sort = resolve_sort(params.sort, geospatial=geo is not None, text_plan=text_plan)

        result = await execute_query(self.store, item_filter, sort, params.page, params.limit)
        items = result.items
        if geo is not None:
            items = annotate_distances(items, geo.center)

        SEARCH_REQUESTS.labels(
            geospatial=str(geo is not None).lower(), text_strategy=text_plan.strategy
        ).inc()
        logger.info(
            "search q=%r geo=%s sort=%s page=%d limit=%d -> %d of %d",
            params.q,
            geo.center if geo else None,
            sort.field.value if sort else "distance",
            params.page,
            params.limit,
            len(items),
            result.total,
        )
        return assemble_response(items, result.total, params.page, params.limit, geo)
