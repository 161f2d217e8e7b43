"""
Service catalog endpoints
=========================

GET /api/v1/services              -- active catalog, paginated
GET /api/v1/services/categories   -- the fixed category list
GET /api/v1/services/{service_id} -- one catalog entry

The ``id`` from this catalog is what ``/users/nearby-services?service=``
takes.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from roadside.api.dependencies import get_service_repository
from roadside.api.middleware import limiter
from roadside.api.schemas import (
    ErrorResponse,
    Pagination,
    ServiceCategoryListResponse,
    ServiceCategoryResponse,
    ServiceEnvelope,
    ServiceListResponse,
    ServiceSummary,
)
from roadside.config import settings
from roadside.domain.enums import ServiceCategory
from roadside.infrastructure.repositories import ServiceRepository

router = APIRouter(prefix="/services", tags=["services"])


@router.get(
    "",
    response_model=ServiceListResponse,
    summary="List active catalog services",
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def list_services(
    request: Request,
    category: Optional[ServiceCategory] = Query(None),
    search: Optional[str] = Query(
        None, max_length=100, description="Match on name or description"
    ),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    services: ServiceRepository = Depends(get_service_repository),
):
    rows, total = await services.list_services(
        category=category,
        search=search,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return ServiceListResponse(
        data=[ServiceSummary.model_validate(s) for s in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get(
    "/categories",
    response_model=ServiceCategoryListResponse,
    summary="List service categories",
)
async def list_categories():
    return ServiceCategoryListResponse(
        data=[ServiceCategoryResponse.from_category(c) for c in ServiceCategory]
    )


@router.get(
    "/{service_id}",
    response_model=ServiceEnvelope,
    summary="Get a catalog service",
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_service(
    request: Request,
    service_id: int,
    services: ServiceRepository = Depends(get_service_repository),
):
    service = await services.get_by_id(service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return ServiceEnvelope(data=ServiceSummary.model_validate(service))
