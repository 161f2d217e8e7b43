"""FastAPI dependency injection helpers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roadside.infrastructure.database import async_session_factory
from roadside.infrastructure.repositories import (
    EmergencyRepository,
    PartnerRepository,
    ServiceRepository,
    UserRepository,
)


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# Storage handles are resolved per request so tests (and other deployments)
# can swap them through ``app.dependency_overrides``.


def get_partner_repository(db: AsyncSession = Depends(get_db)) -> PartnerRepository:
    return PartnerRepository(db)


def get_emergency_repository(
    db: AsyncSession = Depends(get_db),
) -> EmergencyRepository:
    return EmergencyRepository(db)


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_service_repository(db: AsyncSession = Depends(get_db)) -> ServiceRepository:
    return ServiceRepository(db)
