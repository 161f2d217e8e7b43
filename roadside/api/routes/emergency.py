"""
Emergency endpoints
===================

GET  /api/v1/emergency/nearby-partners               -- partners able to respond
POST /api/v1/emergency/sos                           -- raise an SOS (201)
GET  /api/v1/emergency/{emergency_id}                -- emergency details
PUT  /api/v1/emergency/{emergency_id}/update-location -- move an open SOS
POST /api/v1/emergency/{emergency_id}/cancel         -- cancel an SOS
"""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from roadside.api.dependencies import (
    get_db,
    get_emergency_repository,
    get_partner_repository,
    get_user_repository,
)
from roadside.api.middleware import limiter
from roadside.api.schemas import (
    EmergencyCancelRequest,
    EmergencyEnvelope,
    EmergencyLocationUpdateRequest,
    EmergencyResponse,
    ErrorResponse,
    NearbyPartnersResponse,
    SOSCreateRequest,
)
from roadside.config import settings
from roadside.domain.dispatch import dispatch_nearby
from roadside.domain.entities import GeoPoint
from roadside.domain.errors import EmergencyConflict
from roadside.domain.search import ServiceFilter, parse_search, validate_origin
from roadside.infrastructure.locks import DistributedLock, LockNotAcquired
from roadside.infrastructure.redis_client import get_redis
from roadside.infrastructure.repositories import (
    EmergencyRepository,
    PartnerRepository,
    UserRepository,
    emergency_entity,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emergency", tags=["emergency"])

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


async def _owned_emergency(
    emergencies: EmergencyRepository, emergency_id: int, user_id: int
):
    emergency = await emergencies.get_by_id(emergency_id)
    if not emergency or emergency.user_id != user_id:
        raise HTTPException(
            status_code=404, detail="Emergency not found or access denied"
        )
    return emergency


@router.get(
    "/nearby-partners",
    response_model=NearbyPartnersResponse,
    summary="Find emergency-capable partners near a location",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def nearby_partners(
    request: Request,
    latitude: Optional[str] = Query(None, examples=["28.6139"]),
    longitude: Optional[str] = Query(None, examples=["77.2090"]),
    radius: Optional[str] = Query(
        None, description="Search radius in km (default 20)"
    ),
    emergency_type: Optional[str] = Query(
        None, alias="emergencyType", examples=["breakdown"]
    ),
    partners: PartnerRepository = Depends(get_partner_repository),
):
    search = parse_search(
        latitude,
        longitude,
        radius,
        default_radius_km=settings.emergency_radius_km,
        service_filter=ServiceFilter(
            emergency_type=emergency_type or None, require_services=True
        ),
    )
    ranked = await dispatch_nearby(
        partners, search, limit=settings.max_nearby_results
    )
    return NearbyPartnersResponse.from_ranked(ranked)


@router.post(
    "/sos",
    status_code=201,
    response_model=EmergencyEnvelope,
    summary="Raise an emergency SOS request",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def create_sos(
    request: Request,
    body: SOSCreateRequest,
    db: AsyncSession = Depends(get_db),
    emergencies: EmergencyRepository = Depends(get_emergency_repository),
    users: UserRepository = Depends(get_user_repository),
    redis: aioredis.Redis = Depends(get_redis),
):
    point = GeoPoint(body.latitude, body.longitude)
    validate_origin(point)

    if not await users.get_by_id(body.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    lock = DistributedLock(
        redis, f"sos:{body.user_id}", ttl_seconds=settings.sos_lock_ttl_seconds
    )
    try:
        async with lock:
            if await emergencies.get_open_for_user(body.user_id):
                raise EmergencyConflict(
                    "You already have an active emergency request. Please wait "
                    "for assistance or cancel the existing request."
                )
            emergency = await emergencies.create_emergency(
                user_id=body.user_id,
                emergency_type=body.emergency_type,
                priority=body.priority,
                point=point,
                address=body.address or "",
                description=body.description or "",
            )
            # commit while still holding the lock so the open-emergency
            # check in a concurrent request sees this row
            await db.commit()
    except LockNotAcquired:
        raise EmergencyConflict(
            "An emergency request for this user is already being created"
        ) from None

    logger.info(
        "Emergency %s raised by user %s (%s)",
        emergency.id,
        body.user_id,
        body.emergency_type.value,
    )
    return EmergencyEnvelope(
        message="Emergency request created successfully. Help is on the way.",
        data=EmergencyResponse.model_validate(emergency),
    )


@router.get(
    "/{emergency_id}",
    response_model=EmergencyEnvelope,
    summary="Get emergency details",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_emergency(
    request: Request,
    emergency_id: int,
    emergencies: EmergencyRepository = Depends(get_emergency_repository),
):
    emergency = await emergencies.get_by_id(emergency_id)
    if not emergency:
        raise HTTPException(status_code=404, detail="Emergency not found")
    return EmergencyEnvelope(data=EmergencyResponse.model_validate(emergency))


@router.put(
    "/{emergency_id}/update-location",
    response_model=EmergencyEnvelope,
    summary="Update the location of an open emergency",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def update_emergency_location(
    request: Request,
    emergency_id: int,
    body: EmergencyLocationUpdateRequest,
    emergencies: EmergencyRepository = Depends(get_emergency_repository),
):
    point = GeoPoint(body.latitude, body.longitude)
    validate_origin(point)

    emergency = await _owned_emergency(emergencies, emergency_id, body.user_id)
    if emergency_entity(emergency).is_closed:
        raise HTTPException(
            status_code=400,
            detail="Cannot update resolved or cancelled emergency",
        )

    emergency = await emergencies.update_location(emergency, point, body.address)
    return EmergencyEnvelope(
        message="Emergency location updated successfully",
        data=EmergencyResponse.model_validate(emergency),
    )


@router.post(
    "/{emergency_id}/cancel",
    response_model=EmergencyEnvelope,
    summary="Cancel an emergency",
    description=(
        "Allowed while the emergency is ACTIVE or ASSIGNED. Once a partner "
        "is responding (IN_PROGRESS) it can only be resolved."
    ),
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def cancel_emergency(
    request: Request,
    emergency_id: int,
    body: EmergencyCancelRequest,
    emergencies: EmergencyRepository = Depends(get_emergency_repository),
):
    emergency = await _owned_emergency(emergencies, emergency_id, body.user_id)

    entity = emergency_entity(emergency)
    entity.cancel(body.reason)

    emergency = await emergencies.mark_cancelled(
        emergency, entity.cancellation_reason
    )
    logger.info("Emergency %s cancelled by user %s", emergency_id, body.user_id)
    return EmergencyEnvelope(
        message="Emergency cancelled successfully",
        data=EmergencyResponse.model_validate(emergency),
    )
