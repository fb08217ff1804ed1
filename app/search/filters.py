"""
Filter clauses for item discovery.
Design: A filter is an AND of typed clauses; store adapters translate each clause type
into their own query language instead of the pipeline mutating an untyped dict.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Union

TEXT_FIELDS = ("title", "description")


@dataclass(frozen=True)
class FullTextClause:
    """Indexed full-text match over title and description (relevance-scored)."""

    query: str


@dataclass(frozen=True)
class SubstringTextClause:
    """Case-insensitive substring match on any of the given fields."""

    query: str
    fields: tuple[str, ...] = TEXT_FIELDS


@dataclass(frozen=True)
class CategoryClause:
    category: str


@dataclass(frozen=True)
class ConditionClause:
    condition: str


@dataclass(frozen=True)
class LocationClause:
    """Case-insensitive substring match against the free-text location."""

    text: str


@dataclass(frozen=True)
class AvailabilityClause:
    available: bool = True


@dataclass(frozen=True)
class GeoClause:
    """Items with enabled coordinates within radius_km of (lat, lng)."""

    lat: float
    lng: float
    radius_km: int

    @property
    def radius_meters(self) -> int:
        return self.radius_km * 1000

    @property
    def center(self) -> list[float]:
        # GeoJSON order
        return [self.lng, self.lat]


TextClause = Union[FullTextClause, SubstringTextClause]
Clause = Union[
    FullTextClause,
    SubstringTextClause,
    CategoryClause,
    ConditionClause,
    LocationClause,
    AvailabilityClause,
    GeoClause,
]

C = TypeVar("C")


@dataclass(frozen=True)
class ItemFilter:
    """Immutable conjunction of clauses."""

    clauses: tuple[Clause, ...] = ()

    def first(self, clause_type: type[C]) -> C | None:
        for clause in self.clauses:
            if isinstance(clause, clause_type):
                return clause
        return None

    @property
    def geo(self) -> GeoClause | None:
        return self.first(GeoClause)

    @property
    def is_geospatial(self) -> bool:
        return self.geo is not None


@dataclass
class FilterBuilder:
    """Collects optional criteria. build() always requires available items."""

    _clauses: list[Clause] = field(default_factory=list)

    def add(self, clause: Clause | None) -> "FilterBuilder":
        if clause is not None:
            self._clauses.append(clause)
        return self

    def category(self, value: str | None) -> "FilterBuilder":
        return self.add(CategoryClause(value) if value else None)

    def condition(self, value: str | None) -> "FilterBuilder":
        return self.add(ConditionClause(value) if value else None)

    def location(self, value: str | None) -> "FilterBuilder":
        return self.add(LocationClause(value) if value else None)

    def build(self) -> ItemFilter:
        clauses = [c for c in self._clauses if not isinstance(c, AvailabilityClause)]
        clauses.append(AvailabilityClause(True))
        return ItemFilter(tuple(clauses))
