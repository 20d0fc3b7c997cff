"""Geometry helpers for containment and proximity queries.

Coordinates are always ``[longitude, latitude]`` in degrees. Distances are
great-circle distances on a spherical Earth.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any

from shapely.errors import GEOSException
from shapely.geometry import Point, Polygon, shape

from restaurant_api.errors import InputValidationError

# Mean Earth radius (IUGG)
EARTH_RADIUS_METERS = 6_371_008.8
MAX_LONGITUDE = 180.0
MAX_LATITUDE = 90.0


@dataclass(frozen=True)
class BoundingBox:
    """Lat/lng window used to prefilter rows before exact distance checks.

    Longitude bounds are None when the window wraps a pole or the antimeridian.
    """

    min_lat: float
    max_lat: float
    min_lng: float | None = None
    max_lng: float | None = None


def _is_position(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) >= 2
        and all(isinstance(c, Real) and not isinstance(c, bool) for c in value)
    )


def polygon_from_coordinates(coordinates: Any) -> Polygon:
    """Build a polygon from bare coordinates, supplying the Polygon type.

    Accepts either a single ring ``[[lng, lat], ...]`` or a list of rings
    (exterior first, then holes) as stored on neighborhood records.
    """
    if not isinstance(coordinates, list) or not coordinates:
        raise InputValidationError("coordinates must be a non-empty array")

    rings = [coordinates] if _is_position(coordinates[0]) else coordinates
    try:
        polygon = shape({"type": "Polygon", "coordinates": rings})
    except (GEOSException, ValueError, TypeError, IndexError, AttributeError) as exc:
        raise InputValidationError(f"Invalid polygon coordinates: {exc}") from exc

    if polygon.is_empty or not polygon.is_valid:
        raise InputValidationError("Invalid polygon coordinates: ring is degenerate or self-intersecting")
    return polygon


def polygon_contains(polygon: Polygon, lng: float, lat: float) -> bool:
    """Return True if the point lies inside the polygon or on its boundary."""
    return polygon.covers(Point(lng, lat))


def parse_coordinate(value: Any, name: str, limit: float) -> float:
    """Parse a longitude/latitude query value.

    Raises InputValidationError unless the value is a finite number within
    [-limit, limit].
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InputValidationError(f"{name} must be a number") from None
    if not math.isfinite(number):
        raise InputValidationError(f"{name} must be a finite number")
    if abs(number) > limit:
        raise InputValidationError(f"{name} must be between -{limit:g} and {limit:g}")
    return number


def haversine_meters(lng1: float, lat1: float, lng2: float, lat2: float) -> float:
    """Great-circle distance between two points in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def bounding_box(lng: float, lat: float, radius_meters: float) -> BoundingBox:
    """Smallest lat/lng window containing every point within radius of origin."""
    angular = radius_meters / EARTH_RADIUS_METERS
    d_lat = math.degrees(angular)
    min_lat = lat - d_lat
    max_lat = lat + d_lat

    if min_lat <= -90 or max_lat >= 90:
        return BoundingBox(min_lat=max(min_lat, -90.0), max_lat=min(max_lat, 90.0))

    d_lng = math.degrees(math.asin(min(1.0, math.sin(angular) / math.cos(math.radians(lat)))))
    min_lng = lng - d_lng
    max_lng = lng + d_lng
    if min_lng < -180 or max_lng > 180:
        return BoundingBox(min_lat=min_lat, max_lat=max_lat)
    return BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lng=min_lng, max_lng=max_lng)
