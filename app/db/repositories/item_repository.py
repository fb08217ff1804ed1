"""
Item repository - item data access and the relational item store for discovery.
Challenge: Database query performance; avoid N+1, use indexes.
Design: Implements the ItemStore protocol so the discovery engine can run on SQL directly.
Geo queries prefilter with a bounding box in SQL and finish with exact Haversine in process.
"""

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import Select, asc, desc, func, or_, select
from sqlalchemy.orm import selectinload

from app.db.models.item import Item
from app.db.repositories.base_repository import BaseRepository
from app.search.distance import bounding_box, haversine_km
from app.search.documents import item_to_doc
from app.search.filters import (
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

TS_CONFIG = "simple"
# OFFSET is bound as a signed 64-bit integer
MAX_SQL_OFFSET = 2**63 - 1


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text is matched literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(column, text: str):
    return column.ilike(f"%{escape_like(text)}%", escape="\\")


def _ts_vector():
    return func.to_tsvector(
        TS_CONFIG, func.coalesce(Item.title, "") + " " + func.coalesce(Item.description, "")
    )


def _ts_query(text: str):
    return func.plainto_tsquery(TS_CONFIG, text)


class ItemRepository(BaseRepository[Item]):
    """Item-specific queries. Uses selectinload to avoid N+1 when loading owner."""

    # One AsyncSession cannot run two statements at once
    concurrent_reads = False

    def __init__(self, session):
        super().__init__(session, Item)

    async def get_by_id_with_owner(self, id: int) -> Item | None:
        """Fetch item with owner in one query (solves N+1 problem)."""
        result = await self._execute(
            select(Item).where(Item.id == id).options(selectinload(Item.owner))
        )
        return result.scalar_one_or_none()

    async def iter_with_owner(self, batch_size: int = 500) -> AsyncIterator[list[Item]]:
        """Yield all items in id order, batch by batch (keyset pagination)."""
        last_id = 0
        while True:
            result = await self._execute(
                select(Item)
                .where(Item.id > last_id)
                .options(selectinload(Item.owner))
                .order_by(Item.id)
                .limit(batch_size)
            )
            batch = list(result.scalars().all())
            if not batch:
                return
            yield batch
            last_id = batch[-1].id

    # --- ItemStore ---

    async def text_index_available(self) -> bool:
        """Full-text search is available on PostgreSQL only."""
        return self.session.get_bind().dialect.name == "postgresql"

    async def find(
        self, item_filter: ItemFilter, sort: SortSpec | None, skip: int, limit: int
    ) -> list[dict[str, Any]]:
        if skip > MAX_SQL_OFFSET:
            return []
        if item_filter.geo is not None:
            matches = await self._geo_matches(item_filter)
            return [item_to_doc(item) for _, item in matches[skip : skip + limit]]

        stmt = (
            self._filtered(select(Item), item_filter)
            .options(selectinload(Item.owner))
            .order_by(*self._order_by(sort, item_filter))
            .offset(skip)
            .limit(limit)
        )
        result = await self._execute(stmt)
        return [item_to_doc(item) for item in result.scalars().all()]

    async def count(self, item_filter: ItemFilter) -> int:
        if item_filter.geo is not None:
            return len(await self._geo_matches(item_filter))
        result = await self._execute(self._filtered(select(func.count(Item.id)), item_filter))
        return result.scalar_one()

    # --- query building ---

    def _filtered(self, stmt: Select, item_filter: ItemFilter) -> Select:
        for clause in item_filter.clauses:
            stmt = stmt.where(*self._conditions(clause))
        return stmt

    def _conditions(self, clause) -> list:
        if isinstance(clause, FullTextClause):
            return [_ts_vector().op("@@")(_ts_query(clause.query))]
        if isinstance(clause, SubstringTextClause):
            return [or_(*(_contains(getattr(Item, name), clause.query) for name in clause.fields))]
        if isinstance(clause, CategoryClause):
            return [Item.category == clause.category]
        if isinstance(clause, ConditionClause):
            return [Item.condition == clause.condition]
        if isinstance(clause, LocationClause):
            return [_contains(Item.location, clause.text)]
        if isinstance(clause, AvailabilityClause):
            return [Item.available.is_(clause.available)]
        if isinstance(clause, GeoClause):
            min_lat, max_lat, min_lng, max_lng = bounding_box(clause.lat, clause.lng, clause.radius_km)
            conditions = [
                Item.coordinates_enabled.is_(True),
                Item.latitude.is_not(None),
                Item.longitude.is_not(None),
                Item.latitude.between(min_lat, max_lat),
            ]
            if min_lng is not None:
                conditions.append(Item.longitude.between(min_lng, max_lng))
            return conditions
        raise TypeError(f"Unsupported filter clause: {clause!r}")

    def _order_by(self, sort: SortSpec | None, item_filter: ItemFilter) -> list:
        if sort is None:
            return [Item.id.asc()]
        direction = desc if sort.descending else asc
        if sort.field is SortField.RELEVANCE:
            text = item_filter.first(FullTextClause)
            if text is not None:
                return [func.ts_rank(_ts_vector(), _ts_query(text.query)).desc(), Item.id.desc()]
            return [Item.created_at.desc(), Item.id.desc()]
        column = Item.title if sort.field is SortField.TITLE else Item.created_at
        return [direction(column), direction(Item.id)]

    async def _geo_matches(self, item_filter: ItemFilter) -> list[tuple[float, Item]]:
        """Candidates from the bounding box, kept within radius, nearest first."""
        geo = item_filter.geo
        stmt = self._filtered(select(Item), item_filter).options(selectinload(Item.owner))
        result = await self._execute(stmt)
        matches = []
        for item in result.scalars().all():
            distance = haversine_km(geo.lat, geo.lng, item.latitude, item.longitude)
            if distance <= geo.radius_km:
                matches.append((distance, item))
        matches.sort(key=lambda pair: (pair[0], pair[1].id))
        return matches
