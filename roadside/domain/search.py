"""
Nearby-search request objects and input parsing.

Query-string values arrive as raw strings so that missing, non-numeric and
out-of-range input can all be reported with the same 400 envelope.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from .entities import GeoPoint
from .errors import InvalidCoordinates, InvalidRadius


@dataclass(frozen=True)
class ServiceFilter:
    """
    The one point of variation between the nearby searches.

    * ``service_id``       -- partner must offer this catalog service.
    * ``emergency_type``   -- partner must offer an active emergency-category
      service whose name matches the type.
    * ``require_services`` -- partner must offer at least one service.
    """

    service_id: Optional[int] = None
    emergency_type: Optional[str] = None
    require_services: bool = False


@dataclass(frozen=True)
class SearchRequest:
    origin: GeoPoint
    radius_km: float
    service_filter: ServiceFilter = field(default_factory=ServiceFilter)


def validate_origin(origin: GeoPoint) -> None:
    if not origin.is_valid:
        raise InvalidCoordinates()


def validate_radius(radius_km: float) -> None:
    if not math.isfinite(radius_km) or radius_km <= 0:
        raise InvalidRadius("Radius must be a positive number of kilometres")


def validate_search(search: SearchRequest) -> None:
    validate_origin(search.origin)
    validate_radius(search.radius_km)


def _to_float(raw: str | float | None, error: type) -> float:
    try:
        return float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise error("Invalid coordinate or radius values") from None


def parse_search(
    latitude: Optional[str],
    longitude: Optional[str],
    radius: Optional[str],
    *,
    default_radius_km: float,
    service_filter: ServiceFilter | None = None,
) -> SearchRequest:
    """Build a validated ``SearchRequest`` from raw query parameters."""
    if latitude in (None, "") or longitude in (None, ""):
        raise InvalidCoordinates("Latitude and longitude are required")

    origin = GeoPoint(
        latitude=_to_float(latitude, InvalidCoordinates),
        longitude=_to_float(longitude, InvalidCoordinates),
    )
    radius_km = (
        default_radius_km
        if radius in (None, "")
        else _to_float(radius, InvalidRadius)
    )

    search = SearchRequest(
        origin=origin,
        radius_km=radius_km,
        service_filter=service_filter or ServiceFilter(),
    )
    validate_search(search)
    return search
