"""
Distance calculation using the Haversine formula.

Partner distances are always recomputed here from the stored coordinates.
PostGIS's own distance depends on the geometry/geography cast and SRID in
use, so it is only used to pre-filter candidates and never reaches the
response.

Complexity: O(1) per call.
"""

import math

from .entities import GeoPoint

EARTH_RADIUS_KM = 6_371.0


def haversine_km(origin: GeoPoint, target: GeoPoint) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(origin.latitude), math.radians(target.latitude)
    dlat = math.radians(target.latitude - origin.latitude)
    dlng = math.radians(target.longitude - origin.longitude)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # rounding can push ``a`` a hair past 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
