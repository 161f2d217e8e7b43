"""
PostGIS query construction for the nearby-partner search.

This is the only place where a ``GeoPoint`` is turned into PostGIS's
``(longitude, latitude)`` argument order.  The radius filter runs on
geography casts so ``ST_DWithin`` takes metres.
"""

from __future__ import annotations

import re
from typing import Optional

from geoalchemy2 import Geography
from sqlalchemy import Select, and_, cast, func, select

from .models import PartnerModel, ServiceModel
from roadside.domain.entities import GeoPoint
from roadside.domain.enums import ApprovalStatus, ServiceCategory
from roadside.domain.search import SearchRequest, ServiceFilter, validate_search

_GEOGRAPHY = Geography(geometry_type="POINT", srid=4326)


def make_point(point: GeoPoint):
    """SQL expression for *point* as an SRID 4326 geometry."""
    return func.ST_SetSRID(func.ST_MakePoint(point.longitude, point.latitude), 4326)


def emergency_name_pattern(emergency_type: str) -> Optional[str]:
    """
    ``"flat_tire"`` -> ``"%flat%tire%"`` for a case-insensitive name match.

    Returns ``None`` when the type holds no letters or digits (``"_"``,
    ``"--"``); such a type applies no name filter rather than matching
    every emergency service through ``"%%"``.
    """
    words = [w for w in re.split(r"[^0-9A-Za-z]+", emergency_type) if w]
    if not words:
        return None
    return "%" + "%".join(words) + "%"


def _apply_service_filter(query: Select, service_filter: ServiceFilter) -> Select:
    if service_filter.service_id is not None:
        query = query.where(
            PartnerModel.services.any(ServiceModel.id == service_filter.service_id)
        )
    if service_filter.require_services:
        query = query.where(PartnerModel.services.any())
    pattern = emergency_name_pattern(service_filter.emergency_type or "")
    if pattern is not None:
        query = query.where(
            PartnerModel.services.any(
                and_(
                    ServiceModel.category == ServiceCategory.EMERGENCY,
                    ServiceModel.is_active.is_(True),
                    ServiceModel.name.ilike(pattern),
                )
            )
        )
    return query


def nearby_partners_query(search: SearchRequest) -> Select:
    """
    Approved partners within ``search.radius_km`` of ``search.origin``.

    Raises ``InvalidCoordinates`` / ``InvalidRadius`` before building
    anything.  No ORDER BY or LIMIT: ranking happens in Python on the full
    candidate set.
    """
    validate_search(search)
    origin = cast(make_point(search.origin), _GEOGRAPHY)

    query = select(PartnerModel).where(
        PartnerModel.approval_status == ApprovalStatus.APPROVED,
        PartnerModel.location.is_not(None),
        func.ST_DWithin(
            cast(PartnerModel.location, _GEOGRAPHY),
            origin,
            search.radius_km * 1000,
        ),
    )
    return _apply_service_filter(query, search.service_filter)
