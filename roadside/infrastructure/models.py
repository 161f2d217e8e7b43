"""
SQLAlchemy ORM models  (maps to PostgreSQL + PostGIS).

Tables
------
* ``users``             -- registered customers
* ``services``          -- service catalog (repair, emergency, ...)
* ``partners``          -- garages / tyre shops with a shop location
* ``partner_services``  -- which partner offers which catalog service
* ``emergencies``       -- SOS requests raised by customers

Indexes
-------
* **GIST** on geometry columns (``partners.location``, ``emergencies.location``)
  for ``ST_DWithin`` radius searches.  Declared explicitly, so the columns
  set ``spatial_index=False`` to stop geoalchemy2 emitting a second index
  under the same ``idx_<table>_<column>`` name.
* **B-Tree** on ``approval_status``, ``rating``, ``status``, ``user_id``
  for the search filter and the one-open-emergency-per-user check.

Locations are stored twice: as a PostGIS point (``lng lat`` order, SRID 4326)
for spatial filtering, and as plain ``latitude`` / ``longitude`` floats that
the application reads back into a ``GeoPoint``.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    func,
)
from sqlalchemy.orm import relationship
from geoalchemy2 import Geometry

from .database import Base
from roadside.domain.enums import (
    ApprovalStatus,
    BusinessType,
    EmergencyPriority,
    EmergencyStatus,
    EmergencyType,
    ServiceCategory,
)


def _values(enum_cls):
    return [member.value for member in enum_cls]


partner_services = Table(
    "partner_services",
    Base.metadata,
    Column("partner_id", Integer, ForeignKey("partners.id"), primary_key=True),
    Column("service_id", Integer, ForeignKey("services.id"), primary_key=True),
)


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    phone = Column(String(20), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ServiceModel(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    category = Column(
        Enum(ServiceCategory, values_callable=_values), nullable=False
    )
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_services_category", "category", "is_active"),
    )


class PartnerModel(Base):
    __tablename__ = "partners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    shop_name = Column(String(100), nullable=False)
    owner_name = Column(String(100), nullable=False)
    business_type = Column(
        Enum(BusinessType, values_callable=_values),
        default=BusinessType.TIRE_SHOP,
    )
    mobile_number = Column(String(10), unique=True, nullable=False)
    shop_address = Column(String(500), nullable=False)

    location = Column(
        Geometry("POINT", srid=4326, spatial_index=False), nullable=True
    )
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    approval_status = Column(
        Enum(ApprovalStatus, values_callable=_values),
        default=ApprovalStatus.PENDING,
        nullable=False,
    )
    is_online = Column(Boolean, default=False)
    rating = Column(Float, default=0.0)
    review_count = Column(Integer, default=0)
    is_emergency_service = Column(Boolean, default=False)
    emergency_radius_km = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    services = relationship(
        ServiceModel, secondary=partner_services, lazy="selectin"
    )

    __table_args__ = (
        Index("idx_partners_location", "location", postgresql_using="gist"),
        Index("idx_partners_approval", "approval_status"),
        Index("idx_partners_rating", "rating"),
    )


class EmergencyModel(Base):
    __tablename__ = "emergencies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    emergency_type = Column(
        Enum(EmergencyType, values_callable=_values), nullable=False
    )
    priority = Column(
        Enum(EmergencyPriority, values_callable=_values),
        default=EmergencyPriority.MEDIUM,
        nullable=False,
    )
    status = Column(
        Enum(EmergencyStatus, values_callable=_values),
        default=EmergencyStatus.ACTIVE,
        nullable=False,
    )

    location = Column(
        Geometry("POINT", srid=4326, spatial_index=False), nullable=False
    )
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(500), default="")
    description = Column(String(500), default="")

    assigned_partner_id = Column(
        Integer, ForeignKey("partners.id"), nullable=True
    )
    cancellation_reason = Column(String(255), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_emergencies_location", "location", postgresql_using="gist"),
        Index("idx_emergencies_user_status", "user_id", "status"),
    )
