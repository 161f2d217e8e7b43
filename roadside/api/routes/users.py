"""
Customer endpoints
==================

GET /api/v1/users/nearby-services -- approved partners near a point,
                                     optionally offering one catalog service
GET /api/v1/users/emergencies     -- a customer's SOS history
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from roadside.api.dependencies import (
    get_emergency_repository,
    get_partner_repository,
    get_user_repository,
)
from roadside.api.middleware import limiter
from roadside.api.schemas import (
    EmergencyListResponse,
    EmergencyResponse,
    ErrorResponse,
    NearbyPartnersResponse,
    Pagination,
)
from roadside.config import settings
from roadside.domain.dispatch import dispatch_nearby
from roadside.domain.enums import EmergencyStatus
from roadside.domain.search import ServiceFilter, parse_search
from roadside.infrastructure.repositories import (
    EmergencyRepository,
    PartnerRepository,
    UserRepository,
)

router = APIRouter(prefix="/users", tags=["users"])


def _service_id(raw: Optional[str]) -> Optional[int]:
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid service id") from None


@router.get(
    "/nearby-services",
    response_model=NearbyPartnersResponse,
    summary="Find approved service partners near a location",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def nearby_services(
    request: Request,
    latitude: Optional[str] = Query(None, examples=["28.6139"]),
    longitude: Optional[str] = Query(None, examples=["77.2090"]),
    radius: Optional[str] = Query(
        None, description="Search radius in km (default 10)"
    ),
    service: Optional[str] = Query(None, description="Catalog service id"),
    partners: PartnerRepository = Depends(get_partner_repository),
):
    search = parse_search(
        latitude,
        longitude,
        radius,
        default_radius_km=settings.nearby_services_radius_km,
        service_filter=ServiceFilter(service_id=_service_id(service)),
    )
    ranked = await dispatch_nearby(
        partners, search, limit=settings.max_nearby_results
    )
    return NearbyPartnersResponse.from_ranked(ranked)


@router.get(
    "/emergencies",
    response_model=EmergencyListResponse,
    summary="A customer's emergency history, newest first",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def emergency_history(
    request: Request,
    user_id: int = Query(...),
    status: Optional[EmergencyStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    users: UserRepository = Depends(get_user_repository),
    emergencies: EmergencyRepository = Depends(get_emergency_repository),
):
    if not await users.get_by_id(user_id):
        raise HTTPException(status_code=404, detail="User not found")

    rows, total = await emergencies.list_emergencies(
        user_id=user_id, status=status, offset=(page - 1) * limit, limit=limit
    )
    return EmergencyListResponse(
        data=[EmergencyResponse.model_validate(e) for e in rows],
        pagination=Pagination.build(page, limit, total),
    )
