"""Pagination metadata and response shaping. No I/O."""

import math
from typing import Any

from app.schemas.search import GeospatialInfo, ItemSearchResult, Pagination, SearchResponse
from app.search.filters import GeoClause


def build_pagination(total: int, page: int, limit: int) -> Pagination:
    """limit must be >= 1 (guaranteed by the normalizer)."""
    total_pages = math.ceil(total / limit)
    return Pagination(
        page=page,
        limit=limit,
        totalPages=total_pages,
        hasNextPage=page < total_pages,
        hasPrevPage=page > 1,
    )


def assemble_response(
    items: list[dict[str, Any]],
    total: int,
    page: int,
    limit: int,
    geo: GeoClause | None = None,
) -> SearchResponse:
    geospatial = None
    if geo is not None:
        geospatial = GeospatialInfo(center=geo.center, radius=geo.radius_km)
    return SearchResponse(
        success=True,
        count=len(items),
        total=total,
        pagination=build_pagination(total, page, limit),
        geospatial=geospatial,
        data=[ItemSearchResult.model_validate(doc) for doc in items],
    )
