"""Search response schemas - public discovery API contract."""

from datetime import datetime

from pydantic import BaseModel, Field, model_serializer


class PointCoordinates(BaseModel):
    type: str = "Point"
    coordinates: list[float] | None = None  # [lng, lat]
    enabled: bool = False


class ItemOwner(BaseModel):
    id: int
    full_name: str | None = None
    email: str | None = None


class ItemSearchResult(BaseModel):
    id: int
    title: str
    description: str | None = None
    category: str
    condition: str
    location: str | None = None
    coordinates: PointCoordinates = Field(default_factory=PointCoordinates)
    available: bool = True
    moderation_status: str = "pending"
    owner: ItemOwner | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # Only set for geospatial searches
    distance: float | None = None

    @model_serializer(mode="wrap")
    def _omit_missing_distance(self, handler):
        data = handler(self)
        if data.get("distance") is None:
            data.pop("distance", None)
        return data


class Pagination(BaseModel):
    page: int
    limit: int
    totalPages: int
    hasNextPage: bool
    hasPrevPage: bool


class GeospatialInfo(BaseModel):
    center: list[float]  # [lng, lat]
    radius: int  # km


class SearchResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    pagination: Pagination
    geospatial: GeospatialInfo | None = None
    data: list[ItemSearchResult]
