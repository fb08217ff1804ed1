"""Great-circle distance annotation for geospatial results."""

import math
from collections.abc import Iterable
from typing import Any

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in kilometers between two (lat, lng) points in degrees."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    a = min(1.0, a)  # float error near antipodes
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def bounding_box(
    lat: float, lng: float, radius_km: float
) -> tuple[float, float, float | None, float | None]:
    """(min_lat, max_lat, min_lng, max_lng) enclosing the circle around (lat, lng).

    Longitude bounds are None when the circle covers a pole or crosses the antimeridian.
    """
    angular = radius_km / EARTH_RADIUS_KM
    min_lat = lat - math.degrees(angular)
    max_lat = lat + math.degrees(angular)
    if min_lat <= -90 or max_lat >= 90:
        return max(min_lat, -90.0), min(max_lat, 90.0), None, None
    ratio = math.sin(angular) / math.cos(math.radians(lat))
    if ratio >= 1:
        return min_lat, max_lat, None, None
    d_lng = math.degrees(math.asin(ratio))
    if lng - d_lng < -180 or lng + d_lng > 180:
        return min_lat, max_lat, None, None
    return min_lat, max_lat, lng - d_lng, lng + d_lng


def item_point(doc: dict[str, Any]) -> tuple[float, float] | None:
    """(lat, lng) of an item document with enabled coordinates, else None."""
    coords = doc.get("coordinates") or {}
    point = coords.get("coordinates")
    if not coords.get("enabled") or not point or len(point) != 2:
        return None
    lng, lat = point
    return float(lat), float(lng)


def annotate_distances(items: Iterable[dict[str, Any]], center: list[float]) -> list[dict[str, Any]]:
    """Copy each document adding "distance" (km, 2 decimals) from center [lng, lat]."""
    center_lng, center_lat = center
    annotated = []
    for doc in items:
        point = item_point(doc)
        if point is None:
            annotated.append(doc)
            continue
        lat, lng = point
        annotated.append({**doc, "distance": round(haversine_km(center_lat, center_lng, lat, lng), 2)})
    return annotated
