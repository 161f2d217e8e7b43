"""Initial schema with PostGIS extension and all core tables.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geometry


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


APPROVAL_STATUS = sa.Enum(
    "pending", "approved", "rejected", "suspended", name="approvalstatus"
)
BUSINESS_TYPE = sa.Enum(
    "garage",
    "tire_shop",
    "petrol_pump",
    "ev_charging",
    "battery_swap",
    "car_wash",
    "towing",
    "emergency_service",
    "other",
    name="businesstype",
)
SERVICE_CATEGORY = sa.Enum(
    "repair",
    "maintenance",
    "emergency",
    "cleaning",
    "fuel",
    "battery",
    "other",
    name="servicecategory",
)
EMERGENCY_TYPE = sa.Enum(
    "breakdown",
    "accident",
    "fuel_empty",
    "battery_dead",
    "flat_tire",
    "medical",
    "other",
    name="emergencytype",
)
EMERGENCY_PRIORITY = sa.Enum(
    "low", "medium", "high", "critical", name="emergencypriority"
)
EMERGENCY_STATUS = sa.Enum(
    "active",
    "assigned",
    "in_progress",
    "resolved",
    "cancelled",
    name="emergencystatus",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    # Enable PostGIS extension
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=True),
        sa.Column("phone", sa.String(20), unique=True, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── services ──────────────────────────────────────────────────────
    op.create_table(
        "services",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("category", SERVICE_CATEGORY, nullable=False),
        sa.Column("is_active", sa.Boolean, default=True, nullable=False),
    )
    op.create_index(
        "idx_services_category", "services", ["category", "is_active"]
    )

    # ── partners ──────────────────────────────────────────────────────
    op.create_table(
        "partners",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("shop_name", sa.String(100), nullable=False),
        sa.Column("owner_name", sa.String(100), nullable=False),
        sa.Column("business_type", BUSINESS_TYPE, default="tire_shop"),
        sa.Column("mobile_number", sa.String(10), unique=True, nullable=False),
        sa.Column("shop_address", sa.String(500), nullable=False),
        sa.Column(
            "location",
            Geometry("POINT", srid=4326, spatial_index=False),
            nullable=True,
        ),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column(
            "approval_status",
            APPROVAL_STATUS,
            default="pending",
            nullable=False,
        ),
        sa.Column("is_online", sa.Boolean, default=False),
        sa.Column("rating", sa.Float, default=0.0),
        sa.Column("review_count", sa.Integer, default=0),
        sa.Column("is_emergency_service", sa.Boolean, default=False),
        sa.Column("emergency_radius_km", sa.Float, nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "idx_partners_location",
        "partners",
        ["location"],
        postgresql_using="gist",
    )
    op.create_index("idx_partners_approval", "partners", ["approval_status"])
    op.create_index("idx_partners_rating", "partners", ["rating"])

    # ── partner_services ──────────────────────────────────────────────
    op.create_table(
        "partner_services",
        sa.Column(
            "partner_id",
            sa.Integer,
            sa.ForeignKey("partners.id"),
            primary_key=True,
        ),
        sa.Column(
            "service_id",
            sa.Integer,
            sa.ForeignKey("services.id"),
            primary_key=True,
        ),
    )

    # ── emergencies ───────────────────────────────────────────────────
    op.create_table(
        "emergencies",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("emergency_type", EMERGENCY_TYPE, nullable=False),
        sa.Column(
            "priority", EMERGENCY_PRIORITY, default="medium", nullable=False
        ),
        sa.Column("status", EMERGENCY_STATUS, default="active", nullable=False),
        sa.Column(
            "location",
            Geometry("POINT", srid=4326, spatial_index=False),
            nullable=False,
        ),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("address", sa.String(500), default=""),
        sa.Column("description", sa.String(500), default=""),
        sa.Column(
            "assigned_partner_id",
            sa.Integer,
            sa.ForeignKey("partners.id"),
            nullable=True,
        ),
        sa.Column("cancellation_reason", sa.String(255), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "idx_emergencies_location",
        "emergencies",
        ["location"],
        postgresql_using="gist",
    )
    op.create_index(
        "idx_emergencies_user_status", "emergencies", ["user_id", "status"]
    )


def downgrade() -> None:
    op.drop_table("emergencies")
    op.drop_table("partner_services")
    op.drop_table("partners")
    op.drop_table("services")
    op.drop_table("users")
    for enum_name in (
        "emergencystatus",
        "emergencypriority",
        "emergencytype",
        "servicecategory",
        "businesstype",
        "approvalstatus",
    ):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
