"""
Geo clause builder.
Challenge: Bad coordinates must not fail the request; they turn the search into a non-geo one.
"""

import logging

from app.search.filters import GeoClause
from app.search.metrics import SEARCH_DEGRADED

logger = logging.getLogger(__name__)

LAT_RANGE = (-90.0, 90.0)
LNG_RANGE = (-180.0, 180.0)


def coordinates_in_range(lat: float, lng: float) -> bool:
    return LAT_RANGE[0] <= lat <= LAT_RANGE[1] and LNG_RANGE[0] <= lng <= LNG_RANGE[1]


def build_geo_clause(lat: float | None, lng: float | None, radius_km: int) -> GeoClause | None:
    """Return a GeoClause, or None when the request cannot be geospatial.

    Missing coordinates are the normal non-geo case. Unparseable or out-of-range
    coordinates are logged and counted, then skipped.
    """
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        logger.warning("Skipping geo filter: incomplete coordinates lat=%r lng=%r", lat, lng)
        SEARCH_DEGRADED.labels(reason="incomplete_coordinates").inc()
        return None
    if not coordinates_in_range(lat, lng):
        logger.warning("Skipping geo filter: coordinates out of range lat=%s lng=%s", lat, lng)
        SEARCH_DEGRADED.labels(reason="coordinates_out_of_range").inc()
        return None
    return GeoClause(lat=lat, lng=lng, radius_km=radius_km)
