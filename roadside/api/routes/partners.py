"""
Partner endpoints
=================

GET /api/v1/partners/{partner_id}          -- partner profile
PUT /api/v1/partners/{partner_id}/location -- move the shop location
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from roadside.api.dependencies import get_partner_repository
from roadside.api.middleware import limiter
from roadside.api.schemas import (
    ErrorResponse,
    LocationUpdateRequest,
    PartnerEnvelope,
    PartnerResponse,
)
from roadside.config import settings
from roadside.domain.entities import GeoPoint
from roadside.domain.search import validate_origin
from roadside.infrastructure.repositories import PartnerRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/partners", tags=["partners"])


@router.get(
    "/{partner_id}",
    response_model=PartnerEnvelope,
    summary="Get a partner profile",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_partner(
    request: Request,
    partner_id: int,
    partners: PartnerRepository = Depends(get_partner_repository),
):
    partner = await partners.get_by_id(partner_id)
    if not partner:
        raise HTTPException(status_code=404, detail="Partner not found")
    return PartnerEnvelope(data=PartnerResponse.model_validate(partner))


@router.put(
    "/{partner_id}/location",
    response_model=PartnerEnvelope,
    summary="Update a partner's shop location",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def update_partner_location(
    request: Request,
    partner_id: int,
    body: LocationUpdateRequest,
    partners: PartnerRepository = Depends(get_partner_repository),
):
    point = GeoPoint(body.latitude, body.longitude)
    validate_origin(point)

    partner = await partners.get_by_id(partner_id)
    if not partner:
        raise HTTPException(status_code=404, detail="Partner not found")

    partner = await partners.update_location(partner, point)
    logger.info(
        "Partner %s moved to (%.5f, %.5f)", partner_id, point.latitude, point.longitude
    )
    return PartnerEnvelope(
        message="Location updated successfully",
        data=PartnerResponse.model_validate(partner),
    )
