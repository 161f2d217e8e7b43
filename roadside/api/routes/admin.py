"""
Admin / observability endpoints
===============================

GET /api/v1/admin/dashboard   -- partner counts by approval status, open SOS count
GET /api/v1/admin/emergencies -- every emergency, optionally by status
GET /api/v1/admin/health      -- simple health check
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from roadside.api.dependencies import (
    get_emergency_repository,
    get_partner_repository,
)
from roadside.api.middleware import limiter
from roadside.api.schemas import (
    DashboardResponse,
    EmergencyListResponse,
    EmergencyResponse,
    ErrorResponse,
    HealthResponse,
    Pagination,
)
from roadside.config import settings
from roadside.domain.enums import EmergencyStatus
from roadside.infrastructure.repositories import (
    EmergencyRepository,
    PartnerRepository,
)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Partner moderation and emergency counters",
)
@limiter.limit(settings.rate_limit)
async def dashboard(
    request: Request,
    partners: PartnerRepository = Depends(get_partner_repository),
    emergencies: EmergencyRepository = Depends(get_emergency_repository),
):
    return DashboardResponse(
        partners_by_status=await partners.count_by_status(),
        open_emergencies=await emergencies.count_open(),
    )


@router.get(
    "/emergencies",
    response_model=EmergencyListResponse,
    summary="All emergencies, newest first",
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def list_emergencies(
    request: Request,
    status: Optional[EmergencyStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    emergencies: EmergencyRepository = Depends(get_emergency_repository),
):
    rows, total = await emergencies.list_emergencies(
        status=status, offset=(page - 1) * limit, limit=limit
    )
    return EmergencyListResponse(
        data=[EmergencyResponse.model_validate(e) for e in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
