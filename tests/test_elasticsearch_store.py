"""
Elasticsearch store tests - DSL translation and client error handling (client is mocked).
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import AuthorizationException, NotFoundError
from elasticsearch import ConnectionError as ESConnectionError

from app.core.errors import SearchBackendError
from app.search.elasticsearch_client import items_index_mappings
from app.search.elasticsearch_store import (
    MAX_RESULT_WINDOW,
    ElasticsearchItemStore,
    build_query,
    build_sort,
    escape_wildcard,
)
from app.search.engine import DiscoveryEngine
from app.search.filters import FilterBuilder, FullTextClause, GeoClause, SubstringTextClause
from app.search.sorting import RECENT, SortField, SortSpec


def _api_error(error_class, status: int, message: str):
    meta = ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )
    return error_class(message, meta, {})


def _not_found() -> NotFoundError:
    return _api_error(NotFoundError, 404, "index_not_found_exception")


def _client(hits=None, count=0, mapping=None):
    client = MagicMock()
    client.search = AsyncMock(return_value={"hits": {"hits": [{"_source": h} for h in (hits or [])]}})
    client.count = AsyncMock(return_value={"count": count})
    client.indices.get_mapping = AsyncMock(return_value=mapping or {})
    return client


def test_query_for_all_clauses():
    item_filter = (
        FilterBuilder()
        .add(FullTextClause("lamp"))
        .category("furniture")
        .condition("good")
        .location("Madrid")
        .add(GeoClause(40.0, -3.0, 5))
        .build()
    )
    query = build_query(item_filter)["bool"]
    assert query["must"] == [
        {"multi_match": {"query": "lamp", "fields": ["title^2", "description"], "fuzziness": "AUTO"}}
    ]
    filters = query["filter"]
    assert {"term": {"category": "furniture"}} in filters
    assert {"term": {"condition": "good"}} in filters
    assert {"wildcard": {"location.raw": {"value": "*Madrid*", "case_insensitive": True}}} in filters
    assert {"term": {"coordinates.enabled": True}} in filters
    assert {
        "geo_distance": {"distance": "5000m", "coordinates.coordinates": {"lat": 40.0, "lon": -3.0}}
    } in filters
    assert filters[-1] == {"term": {"available": True}}


def test_substring_query_matches_title_or_description():
    query = build_query(FilterBuilder().add(SubstringTextClause("a*b")).build())["bool"]
    assert "must" not in query
    assert query["filter"][0] == {
        "bool": {
            "should": [
                {"wildcard": {"title.raw": {"value": "*a\\*b*", "case_insensitive": True}}},
                {"wildcard": {"description.raw": {"value": "*a\\*b*", "case_insensitive": True}}},
            ],
            "minimum_should_match": 1,
        }
    }


def test_escape_wildcard():
    assert escape_wildcard("50% off? *new*") == "50% off\\? \\*new\\*"


def test_sorts_have_matching_tie_breakers():
    assert build_sort(RECENT, None) == [{"created_at": {"order": "desc"}}, {"id": {"order": "desc"}}]
    assert build_sort(SortSpec(SortField.CREATED_AT, False), None) == [
        {"created_at": {"order": "asc"}},
        {"id": {"order": "asc"}},
    ]
    assert build_sort(SortSpec(SortField.TITLE, False), None)[0] == {"title.raw": {"order": "asc"}}
    assert build_sort(SortSpec(SortField.RELEVANCE, True), None)[0] == {"_score": {"order": "desc"}}


def test_geo_sort_by_distance():
    sort = build_sort(None, GeoClause(40.0, -3.0, 5))
    assert sort[0] == {
        "_geo_distance": {
            "coordinates.coordinates": {"lat": 40.0, "lon": -3.0},
            "order": "asc",
            "unit": "km",
        }
    }


@pytest.mark.asyncio
async def test_find_returns_sources_with_paging():
    client = _client(hits=[{"id": 1}, {"id": 2}])
    store = ElasticsearchItemStore(client, "items")
    docs = await store.find(FilterBuilder().build(), RECENT, skip=24, limit=12)
    assert docs == [{"id": 1}, {"id": 2}]
    kwargs = client.search.await_args.kwargs
    assert kwargs["index"] == "items"
    assert (kwargs["from_"], kwargs["size"]) == (24, 12)


@pytest.mark.asyncio
async def test_find_beyond_result_window_is_empty():
    client = _client()
    store = ElasticsearchItemStore(client, "items")
    assert await store.find(FilterBuilder().build(), RECENT, skip=MAX_RESULT_WINDOW, limit=12) == []
    client.search.assert_not_awaited()


@pytest.mark.asyncio
async def test_count():
    store = ElasticsearchItemStore(_client(count=42), "items")
    assert await store.count(FilterBuilder().build()) == 42


@pytest.mark.asyncio
async def test_missing_index_reads_as_empty():
    client = _client()
    client.search.side_effect = _not_found()
    client.count.side_effect = _not_found()
    client.indices.get_mapping.side_effect = _not_found()
    store = ElasticsearchItemStore(client, "items")
    assert await store.find(FilterBuilder().build(), RECENT, 0, 12) == []
    assert await store.count(FilterBuilder().build()) == 0
    assert await store.text_index_available() is False


@pytest.mark.asyncio
async def test_connection_errors_become_backend_errors():
    client = _client()
    client.search.side_effect = ESConnectionError("connection refused")
    client.count.side_effect = ESConnectionError("connection refused")
    store = ElasticsearchItemStore(client, "items")
    with pytest.raises(SearchBackendError):
        await store.find(FilterBuilder().build(), RECENT, 0, 12)
    with pytest.raises(SearchBackendError):
        await store.count(FilterBuilder().build())


@pytest.mark.asyncio
async def test_text_index_detected_from_mapping_and_cached():
    mapping = {
        "items": {
            "mappings": {"properties": {"title": {"type": "text"}, "description": {"type": "text"}}}
        }
    }
    client = _client(mapping=mapping)
    store = ElasticsearchItemStore(client, "items")
    assert await store.text_index_available() is True
    assert await store.text_index_available() is True
    assert client.indices.get_mapping.await_count == 1


@pytest.mark.asyncio
async def test_keyword_only_mapping_has_no_text_index():
    mapping = {"items": {"mappings": {"properties": {"title": {"type": "keyword"}}}}}
    store = ElasticsearchItemStore(_client(mapping=mapping), "items")
    assert await store.text_index_available() is False


@pytest.mark.asyncio
async def test_forbidden_mapping_read_means_no_text_index():
    client = _client()
    client.indices.get_mapping.side_effect = _api_error(AuthorizationException, 403, "security_exception")
    store = ElasticsearchItemStore(client, "items")
    assert await store.text_index_available() is False


@pytest.mark.asyncio
async def test_mapping_connection_error_is_backend_error():
    client = _client()
    client.indices.get_mapping.side_effect = ESConnectionError("connection refused")
    with pytest.raises(SearchBackendError):
        await ElasticsearchItemStore(client, "items").text_index_available()


@pytest.mark.asyncio
async def test_text_search_falls_back_to_substring_when_mapping_is_forbidden():
    client = _client(hits=[{"id": 7, "title": "Desk lamp", "category": "furniture", "condition": "good"}], count=1)
    client.indices.get_mapping.side_effect = _api_error(AuthorizationException, 403, "security_exception")
    response = await DiscoveryEngine(ElasticsearchItemStore(client, "items")).search({"q": "lamp"})
    assert [item.id for item in response.data] == [7]
    query = client.search.await_args.kwargs["query"]["bool"]
    assert "must" not in query
    assert query["filter"][0]["bool"]["should"][0] == {
        "wildcard": {"title.raw": {"value": "*lamp*", "case_insensitive": True}}
    }


def test_raw_keywords_cover_long_descriptions():
    properties = items_index_mappings()["properties"]
    assert properties["description"]["fields"]["raw"]["ignore_above"] >= 8191
    assert properties["title"]["fields"]["raw"]["type"] == "keyword"
