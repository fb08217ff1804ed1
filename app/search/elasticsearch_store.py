"""
Elasticsearch item store - translates filter clauses and sort specs into the query DSL.
Challenge: Relevance, substring fallback and proximity ordering over one index.
"""

import logging
import time
from typing import Any

from elasticsearch import ApiError, AsyncElasticsearch, NotFoundError, TransportError

from app.core.errors import SearchBackendError
from app.search.filters import (
    TEXT_FIELDS,
    AvailabilityClause,
    CategoryClause,
    ConditionClause,
    FullTextClause,
    GeoClause,
    ItemFilter,
    LocationClause,
    SubstringTextClause,
)
from app.search.sorting import SortField, SortSpec

logger = logging.getLogger(__name__)

GEO_FIELD = "coordinates.coordinates"
# index.max_result_window default; from + size beyond it is rejected by ES
MAX_RESULT_WINDOW = 10_000
MAPPING_CACHE_SECONDS = 60.0

_SORT_FIELDS = {
    SortField.CREATED_AT: "created_at",
    SortField.TITLE: "title.raw",
}


def escape_wildcard(value: str) -> str:
    return value.replace("\\", "\\\\").replace("*", "\\*").replace("?", "\\?")


def _contains(field: str, text: str) -> dict:
    return {
        "wildcard": {
            f"{field}.raw": {"value": f"*{escape_wildcard(text)}*", "case_insensitive": True}
        }
    }


def clause_to_query(clause) -> tuple[str, list[dict]]:
    """Map one clause to ("must" | "filter", [queries])."""
    if isinstance(clause, FullTextClause):
        return "must", [{
            "multi_match": {
                "query": clause.query,
                "fields": ["title^2", "description"],
                "fuzziness": "AUTO",
            }
        }]
    if isinstance(clause, SubstringTextClause):
        should = [_contains(name, clause.query) for name in clause.fields]
        return "filter", [{"bool": {"should": should, "minimum_should_match": 1}}]
    if isinstance(clause, CategoryClause):
        return "filter", [{"term": {"category": clause.category}}]
    if isinstance(clause, ConditionClause):
        return "filter", [{"term": {"condition": clause.condition}}]
    if isinstance(clause, LocationClause):
        return "filter", [_contains("location", clause.text)]
    if isinstance(clause, AvailabilityClause):
        return "filter", [{"term": {"available": clause.available}}]
    if isinstance(clause, GeoClause):
        return "filter", [
            {"term": {"coordinates.enabled": True}},
            {
                "geo_distance": {
                    "distance": f"{clause.radius_meters}m",
                    GEO_FIELD: {"lat": clause.lat, "lon": clause.lng},
                }
            },
        ]
    raise TypeError(f"Unsupported filter clause: {clause!r}")


def build_query(item_filter: ItemFilter) -> dict:
    bool_query: dict[str, list[dict]] = {"must": [], "filter": []}
    for clause in item_filter.clauses:
        occur, queries = clause_to_query(clause)
        bool_query[occur].extend(queries)
    return {"bool": {k: v for k, v in bool_query.items() if v}}


def build_sort(sort: SortSpec | None, geo: GeoClause | None) -> list[dict]:
    """Sort clauses; ties always broken by id in the same direction."""
    if sort is None:
        if geo is not None:
            return [
                {
                    "_geo_distance": {
                        GEO_FIELD: {"lat": geo.lat, "lon": geo.lng},
                        "order": "asc",
                        "unit": "km",
                    }
                },
                {"id": {"order": "asc"}},
            ]
        return [{"id": {"order": "asc"}}]
    order = "desc" if sort.descending else "asc"
    if sort.field is SortField.RELEVANCE:
        return [{"_score": {"order": order}}, {"id": {"order": order}}]
    return [{_SORT_FIELDS[sort.field]: {"order": order}}, {"id": {"order": order}}]


def _body(response) -> dict:
    # Response may be ObjectApiResponse; support both .body and dict access
    return getattr(response, "body", response)


class ElasticsearchItemStore:
    """ItemStore backed by the items index."""

    concurrent_reads = True

    def __init__(self, client: AsyncElasticsearch, index: str):
        self.client = client
        self.index = index
        self._text_index: tuple[float, bool] | None = None

    async def text_index_available(self) -> bool:
        """Title and description must be mapped as analyzed text. Cached briefly.

        A rejected mapping read (missing index, no view_index_metadata privilege)
        means substring matching; only connectivity failures raise.
        """
        now = time.monotonic()
        if self._text_index is not None and now - self._text_index[0] < MAPPING_CACHE_SECONDS:
            return self._text_index[1]
        try:
            response = await self.client.indices.get_mapping(index=self.index)
        except NotFoundError:
            logger.warning("Index %s not found; no text index", self.index)
            available = False
        except ApiError as e:
            logger.warning("Mapping of %s unreadable (%s); no text index", self.index, e)
            available = False
        except TransportError as e:
            raise SearchBackendError(f"get_mapping failed: {e}") from e
        else:
            available = False
            for index_body in _body(response).values():
                props = index_body.get("mappings", {}).get("properties", {})
                available = all(props.get(name, {}).get("type") == "text" for name in TEXT_FIELDS)
        self._text_index = (now, available)
        return available

    async def find(
        self, item_filter: ItemFilter, sort: SortSpec | None, skip: int, limit: int
    ) -> list[dict[str, Any]]:
        if skip >= MAX_RESULT_WINDOW:
            return []
        try:
            response = await self.client.search(
                index=self.index,
                query=build_query(item_filter),
                sort=build_sort(sort, item_filter.geo),
                from_=skip,
                size=min(limit, MAX_RESULT_WINDOW - skip),
                track_total_hits=False,
            )
        except NotFoundError:
            logger.warning("search: index %s not found", self.index)
            return []
        except (ApiError, TransportError) as e:
            raise SearchBackendError(f"search failed: {e}") from e
        return [hit["_source"] for hit in _body(response)["hits"]["hits"]]

    async def count(self, item_filter: ItemFilter) -> int:
        try:
            response = await self.client.count(index=self.index, query=build_query(item_filter))
        except NotFoundError:
            return 0
        except (ApiError, TransportError) as e:
            raise SearchBackendError(f"count failed: {e}") from e
        return int(_body(response)["count"])
