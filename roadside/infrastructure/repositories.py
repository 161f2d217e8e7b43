"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  ``PartnerRepository`` satisfies the
``CandidateSource`` protocol used by the dispatch orchestration.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .geo_query import make_point, nearby_partners_query
from .models import EmergencyModel, PartnerModel, ServiceModel, UserModel
from roadside.config import settings
from roadside.domain.entities import Emergency, GeoPoint
from roadside.domain.enums import (
    ApprovalStatus,
    EmergencyPriority,
    EmergencyStatus,
    EmergencyType,
    OPEN_EMERGENCY_STATUSES,
    ServiceCategory,
)
from roadside.domain.errors import StorageQueryFailure
from roadside.domain.ranking import PartnerCandidate
from roadside.domain.search import SearchRequest

logger = logging.getLogger(__name__)


def stored_point(latitude: float | None, longitude: float | None) -> Optional[GeoPoint]:
    """Read the float mirror columns back into a ``GeoPoint``."""
    if latitude is None or longitude is None:
        return None
    return GeoPoint(latitude=latitude, longitude=longitude)


def partner_candidate(partner: PartnerModel) -> PartnerCandidate:
    return PartnerCandidate(
        partner=partner,
        location=stored_point(partner.latitude, partner.longitude),
        rating=partner.rating or 0.0,
    )


def emergency_entity(model: EmergencyModel) -> Emergency:
    return Emergency(
        id=model.id,
        user_id=model.user_id,
        emergency_type=EmergencyType(model.emergency_type),
        priority=EmergencyPriority(model.priority),
        location=GeoPoint(model.latitude, model.longitude),
        status=EmergencyStatus(model.status),
        assigned_partner_id=model.assigned_partner_id,
        cancellation_reason=model.cancellation_reason,
        created_at=model.created_at,
    )


class PartnerRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_candidates(self, search: SearchRequest) -> list[PartnerCandidate]:
        query = nearby_partners_query(search)
        try:
            result = await self.session.execute(query)
            partners = list(result.scalars().unique().all())
        except SQLAlchemyError as exc:
            logger.exception("Nearby partner query failed")
            message = f"Partner query failed: {exc}" if settings.debug else None
            raise StorageQueryFailure(message) from exc
        return [partner_candidate(p) for p in partners]

    async def get_by_id(self, partner_id: int) -> Optional[PartnerModel]:
        return await self.session.get(PartnerModel, partner_id)

    async def update_location(
        self, partner: PartnerModel, point: GeoPoint
    ) -> PartnerModel:
        partner.latitude = point.latitude
        partner.longitude = point.longitude
        partner.location = make_point(point)
        await self.session.flush()
        await self.session.refresh(partner)
        return partner

    async def count_by_status(self) -> dict[str, int]:
        result = await self.session.execute(
            select(PartnerModel.approval_status, func.count()).group_by(
                PartnerModel.approval_status
            )
        )
        counts = {status.value: 0 for status in ApprovalStatus}
        for status, count in result.all():
            counts[ApprovalStatus(status).value] = count
        return counts


class EmergencyRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_emergency(
        self,
        *,
        user_id: int,
        emergency_type: EmergencyType,
        priority: EmergencyPriority,
        point: GeoPoint,
        address: str = "",
        description: str = "",
    ) -> EmergencyModel:
        """Create an emergency with a proper PostGIS geometry column."""
        emergency = EmergencyModel(
            user_id=user_id,
            emergency_type=emergency_type,
            priority=priority,
            status=EmergencyStatus.ACTIVE,
            latitude=point.latitude,
            longitude=point.longitude,
            location=make_point(point),
            address=address,
            description=description,
        )
        self.session.add(emergency)
        await self.session.flush()
        await self.session.refresh(emergency)
        return emergency

    async def get_by_id(self, emergency_id: int) -> Optional[EmergencyModel]:
        return await self.session.get(EmergencyModel, emergency_id)

    async def get_open_for_user(self, user_id: int) -> Optional[EmergencyModel]:
        result = await self.session.execute(
            select(EmergencyModel)
            .where(
                EmergencyModel.user_id == user_id,
                EmergencyModel.status.in_(OPEN_EMERGENCY_STATUSES),
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def update_location(
        self,
        emergency: EmergencyModel,
        point: GeoPoint,
        address: str | None = None,
    ) -> EmergencyModel:
        emergency.latitude = point.latitude
        emergency.longitude = point.longitude
        emergency.location = make_point(point)
        if address:
            emergency.address = address
        await self.session.flush()
        await self.session.refresh(emergency)
        return emergency

    async def mark_cancelled(
        self, emergency: EmergencyModel, reason: str
    ) -> EmergencyModel:
        emergency.status = EmergencyStatus.CANCELLED
        emergency.cancellation_reason = reason
        emergency.cancelled_at = datetime.now(timezone.utc)
        await self.session.flush()
        await self.session.refresh(emergency)
        return emergency

    async def list_emergencies(
        self,
        *,
        user_id: int | None = None,
        status: EmergencyStatus | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[EmergencyModel], int]:
        """Newest first.  Returns one page plus the total matching count."""
        query = select(EmergencyModel)
        if user_id is not None:
            query = query.where(EmergencyModel.user_id == user_id)
        if status is not None:
            query = query.where(EmergencyModel.status == status)

        total = await self.session.scalar(
            select(func.count()).select_from(query.subquery())
        )
        result = await self.session.execute(
            query.order_by(
                EmergencyModel.created_at.desc(), EmergencyModel.id.desc()
            )
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def count_open(self) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(EmergencyModel)
            .where(EmergencyModel.status.in_(OPEN_EMERGENCY_STATUSES))
        )
        return result.scalar() or 0


class ServiceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_services(
        self,
        *,
        category: ServiceCategory | None = None,
        search: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[ServiceModel], int]:
        """Active catalog entries, optionally narrowed by category or text."""
        query = select(ServiceModel).where(ServiceModel.is_active.is_(True))
        if category is not None:
            query = query.where(ServiceModel.category == category)
        if search:
            term = f"%{search}%"
            query = query.where(
                or_(
                    ServiceModel.name.ilike(term),
                    ServiceModel.description.ilike(term),
                )
            )

        total = await self.session.scalar(
            select(func.count()).select_from(query.subquery())
        )
        result = await self.session.execute(
            query.order_by(ServiceModel.category, ServiceModel.name)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def get_by_id(self, service_id: int) -> Optional[ServiceModel]:
        return await self.session.get(ServiceModel, service_id)


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return await self.session.get(UserModel, user_id)
