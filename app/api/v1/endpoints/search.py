"""
Item discovery endpoint - text, filters, geo radius, sorting and pagination in one query.
Challenge: Parameters arrive as raw strings so malformed optional input degrades instead of 422.
"""

from fastapi import APIRouter, Query

from app.core.dependencies import Engine
from app.schemas.search import SearchResponse

router = APIRouter()


@router.get("/search", response_model=SearchResponse)
async def search_items_endpoint(
    engine: Engine,
    q: str | None = Query(None, description="Free-text query over title and description"),
    category: str | None = None,
    condition: str | None = None,
    location: str | None = Query(None, description="Substring of the item's location"),
    lat: str | None = None,
    lng: str | None = None,
    distance: str | None = Query(None, description="Radius in km (default 10)"),
    sort: str | None = Query(None, description="recent | oldest | title | relevance"),
    page: str | None = None,
    limit: str | None = None,
):
    """Public item search. Geo requests are ordered by distance and annotated with it."""
    return await engine.search(
        {
            "q": q,
            "category": category,
            "condition": condition,
            "location": location,
            "lat": lat,
            "lng": lng,
            "distance": distance,
            "sort": sort,
            "page": page,
            "limit": limit,
        }
    )
