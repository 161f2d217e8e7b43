"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from roadside.domain.enums import (
    ApprovalStatus,
    BusinessType,
    EmergencyPriority,
    EmergencyStatus,
    EmergencyType,
    ServiceCategory,
)
from roadside.domain.ranking import RankedResult


# ── Requests ──────────────────────────────────────────────────────────


class LocationUpdateRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class SOSCreateRequest(BaseModel):
    user_id: int
    emergency_type: EmergencyType
    priority: EmergencyPriority = EmergencyPriority.MEDIUM
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=500)


class EmergencyLocationUpdateRequest(LocationUpdateRequest):
    user_id: int
    address: Optional[str] = Field(None, max_length=500)


class EmergencyCancelRequest(BaseModel):
    user_id: int
    reason: Optional[str] = Field(None, max_length=255)


# ── Responses ─────────────────────────────────────────────────────────


class ServiceSummary(BaseModel):
    id: int
    name: str
    category: ServiceCategory
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class ServiceEnvelope(BaseModel):
    success: bool = True
    data: ServiceSummary


class ServiceCategoryResponse(BaseModel):
    id: ServiceCategory
    name: str

    @classmethod
    def from_category(cls, category: ServiceCategory) -> "ServiceCategoryResponse":
        return cls(id=category, name=category.value.replace("_", " ").title())


class ServiceCategoryListResponse(BaseModel):
    success: bool = True
    data: list[ServiceCategoryResponse]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class ServiceListResponse(BaseModel):
    success: bool = True
    data: list[ServiceSummary]
    pagination: Pagination


class PartnerResponse(BaseModel):
    id: int
    shop_name: str
    owner_name: str
    business_type: Optional[BusinessType] = None
    shop_address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    approval_status: ApprovalStatus
    is_online: bool = False
    rating: float = 0.0
    review_count: int = 0
    is_emergency_service: bool = False
    services: list[ServiceSummary] = []

    model_config = {"from_attributes": True}


class NearbyPartnerResponse(PartnerResponse):
    distance: float = Field(..., description="Great-circle distance in km, 2 decimals")

    @classmethod
    def from_ranked(cls, result: RankedResult) -> "NearbyPartnerResponse":
        partner = PartnerResponse.model_validate(result.partner)
        return cls(**partner.model_dump(), distance=result.rounded_distance)


class NearbyPartnersResponse(BaseModel):
    success: bool = True
    data: list[NearbyPartnerResponse] = []

    @classmethod
    def from_ranked(cls, ranked: list[RankedResult]) -> "NearbyPartnersResponse":
        return cls(data=[NearbyPartnerResponse.from_ranked(r) for r in ranked])


class PartnerEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: PartnerResponse


class EmergencyResponse(BaseModel):
    id: int
    user_id: int
    emergency_type: EmergencyType
    priority: EmergencyPriority
    status: EmergencyStatus
    latitude: float
    longitude: float
    address: Optional[str] = None
    description: Optional[str] = None
    assigned_partner_id: Optional[int] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EmergencyEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: EmergencyResponse


class EmergencyListResponse(BaseModel):
    success: bool = True
    data: list[EmergencyResponse]
    pagination: Pagination


class DashboardResponse(BaseModel):
    success: bool = True
    partners_by_status: dict[str, int]
    open_emergencies: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
