"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  PostGIS-specific features (Geometry columns)
are mocked by using plain String columns in the test models.
"""

from types import SimpleNamespace
from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    func,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.pool import StaticPool


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class TestBase(DeclarativeBase):
    pass


# Mirror the production models but without PostGIS Geometry columns
# (SQLite doesn't support them).  Enum columns are stored as plain strings.

test_partner_services = Table(
    "partner_services",
    TestBase.metadata,
    Column("partner_id", Integer, ForeignKey("partners.id"), primary_key=True),
    Column("service_id", Integer, ForeignKey("services.id"), primary_key=True),
)


class TestUserModel(TestBase):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    phone = Column(String(20), unique=True, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class TestServiceModel(TestBase):
    __tablename__ = "services"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    category = Column(String(20), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class TestPartnerModel(TestBase):
    __tablename__ = "partners"
    id = Column(Integer, primary_key=True, autoincrement=True)
    shop_name = Column(String(100), nullable=False)
    owner_name = Column(String(100), nullable=False)
    business_type = Column(String(30), default="tire_shop")
    mobile_number = Column(String(10), unique=True, nullable=False)
    shop_address = Column(String(500), nullable=False)
    location = Column(String, nullable=True)  # stub for Geometry
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    approval_status = Column(String(20), default="pending", nullable=False)
    is_online = Column(Boolean, default=False)
    rating = Column(Float, default=0.0)
    review_count = Column(Integer, default=0)
    is_emergency_service = Column(Boolean, default=False)
    emergency_radius_km = Column(Float, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())

    services = relationship(
        TestServiceModel, secondary=test_partner_services, lazy="selectin"
    )


class TestEmergencyModel(TestBase):
    __tablename__ = "emergencies"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    emergency_type = Column(String(20), nullable=False)
    priority = Column(String(20), default="medium", nullable=False)
    status = Column(String(20), default="active", nullable=False)
    location = Column(String, nullable=True)  # stub for Geometry
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(500), default="")
    description = Column(String(500), default="")
    assigned_partner_id = Column(Integer, ForeignKey("partners.id"), nullable=True)
    cancellation_reason = Column(String(255), nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())


def make_partner(
    partner_id: int,
    latitude: float | None,
    longitude: float | None,
    rating: float = 4.0,
    **overrides,
) -> SimpleNamespace:
    """An attribute bag shaped like a partner row, for storage-free tests."""
    fields = dict(
        id=partner_id,
        shop_name=f"Shop {partner_id}",
        owner_name=f"Owner {partner_id}",
        business_type="garage",
        shop_address=f"{partner_id} Ring Road",
        latitude=latitude,
        longitude=longitude,
        approval_status="approved",
        is_online=True,
        rating=rating,
        review_count=10,
        is_emergency_service=False,
        services=[],
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create tables on a fresh in-memory DB, yield a factory, then drop."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(TestBase.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(TestBase.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
