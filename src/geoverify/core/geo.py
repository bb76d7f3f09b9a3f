from __future__ import annotations
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from math import atan2, cos, floor, isfinite, pi, sin, sqrt

"""
Geospatial primitives.

A spherical-Earth geometry layer (haversine distance, initial bearing, compass
points, bounding boxes) so the verifier and query helpers share one set of
distance math without pulling in heavier GIS dependencies.

None of these functions validate their inputs: run `is_valid_coordinates` first.
Invalid numbers propagate as NaN or meaningless output.
"""

EARTH_RADIUS_M = 6_371_000
METERS_PER_DEGREE_LAT = 111_320

COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lon rectangle approximating a circular search radius."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


@dataclass(frozen=True)
class RadiusCheck:
    is_within: bool
    # NaN when the inputs were not valid coordinates.
    distance: int | float
    radius_meters: float


def _all_finite(*values: float) -> bool:
    return all(isfinite(v) for v in values)


def round_half_up(x: float) -> int | float:
    """Round to the nearest integer, ties toward +inf (unlike Python's banker's `round`).

    NaN and infinities come back unchanged.
    """
    if not isfinite(x):
        return x
    return int(floor(x + 0.5))


def to_radians(degrees: float) -> float:
    return degrees * (pi / 180)


def to_degrees(radians: float) -> float:
    return radians * (180 / pi)


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in meters between two points."""
    if not _all_finite(a.lat, a.lon, b.lat, b.lon):
        return float("nan")
    lat1 = to_radians(a.lat)
    lat2 = to_radians(b.lat)
    dlat = to_radians(b.lat - a.lat)
    dlon = to_radians(b.lon - a.lon)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair outside [0, 1], which sqrt(1 - h) rejects.
    h = min(max(h, 0.0), 1.0)
    return 2 * EARTH_RADIUS_M * atan2(sqrt(h), sqrt(1 - h))


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two lat/lon pairs."""
    return haversine_m(GeoPoint(lat=lat1, lon=lon1), GeoPoint(lat=lat2, lon=lon2))


def is_within_radius(
    user_lat: float, user_lon: float, target_lat: float, target_lon: float, radius_meters: float
) -> RadiusCheck:
    """Check whether the user point lies inside `radius_meters` of the target.

    The comparison uses the exact distance; the reported distance is rounded to meters.
    """
    d = distance(user_lat, user_lon, target_lat, target_lon)
    return RadiusCheck(is_within=d <= radius_meters, distance=round_half_up(d), radius_meters=radius_meters)


def bounding_box(lat: float, lon: float, radius_meters: float) -> BoundingBox:
    """Planar bounding box around a center point (useful for storage-side pre-filtering).

    Longitude span grows as 1/cos(lat) and blows up near the poles; callers must guard.
    """
    if not _all_finite(lat, lon, radius_meters):
        nan = float("nan")
        return BoundingBox(min_lat=nan, max_lat=nan, min_lon=nan, max_lon=nan)
    lat_delta = radius_meters / METERS_PER_DEGREE_LAT
    lon_delta = radius_meters / (METERS_PER_DEGREE_LAT * cos(to_radians(lat)))
    return BoundingBox(
        min_lat=lat - lat_delta,
        max_lat=lat + lat_delta,
        min_lon=lon - lon_delta,
        max_lon=lon + lon_delta,
    )


def bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial bearing from point 1 toward point 2, in degrees clockwise from north [0, 360)."""
    if not _all_finite(lat1, lon1, lat2, lon2):
        return float("nan")
    phi1 = to_radians(lat1)
    phi2 = to_radians(lat2)
    dlon = to_radians(lon2 - lon1)

    y = sin(dlon) * cos(phi2)
    x = cos(phi1) * sin(phi2) - sin(phi1) * cos(phi2) * cos(dlon)
    return (to_degrees(atan2(y, x)) + 360) % 360


def direction(bearing_degrees: float) -> str | None:
    """Map a bearing to the nearest of the 8 compass points (None for a non-finite bearing)."""
    index = round_half_up(bearing_degrees / 45)
    if not isfinite(index):
        return None
    return COMPASS_POINTS[index % 8]


def format_distance(meters: float) -> str:
    """Render a distance for display: `850m` below one kilometer, `2.5km` above."""
    if meters < 1000:
        return f"{round_half_up(meters)}m"
    if not isfinite(meters):
        return f"{meters / 1000}km"
    with localcontext() as ctx:
        # Enough digits for any finite float.
        ctx.prec = 400
        km = (Decimal(meters) / 1000).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{km}km"
