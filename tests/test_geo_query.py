"""
Tests for the PostGIS query builder and the partner repository.

Queries are compiled against the PostgreSQL dialect without a database; the
repository is exercised with a mocked ``AsyncSession``.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from roadside.domain.entities import GeoPoint
from roadside.domain.enums import EmergencyStatus, EmergencyType
from roadside.domain.errors import InvalidCoordinates, InvalidRadius, StorageQueryFailure
from roadside.domain.search import SearchRequest, ServiceFilter
from roadside.infrastructure.geo_query import (
    emergency_name_pattern,
    make_point,
    nearby_partners_query,
)
from roadside.infrastructure.repositories import (
    PartnerRepository,
    emergency_entity,
    partner_candidate,
)

DELHI = GeoPoint(28.6139, 77.2090)


def _sql(search: SearchRequest) -> str:
    return str(nearby_partners_query(search).compile(dialect=postgresql.dialect()))


class TestMakePoint:
    def test_longitude_goes_first(self):
        expr = make_point(DELHI)
        inner, srid = expr.clauses.clauses
        lng, lat = inner.clauses.clauses
        assert lng.value == 77.2090
        assert lat.value == 28.6139
        assert srid.value == 4326


class TestNearbyPartnersQuery:
    def test_base_filters(self):
        sql = _sql(SearchRequest(origin=DELHI, radius_km=10))
        assert "ST_DWithin" in sql
        assert "geography" in sql
        assert "partners.approval_status" in sql
        assert "partners.location IS NOT NULL" in sql
        assert "partner_services" not in sql
        assert "ORDER BY" not in sql
        assert "LIMIT" not in sql

    def test_radius_in_metres(self):
        compiled = nearby_partners_query(
            SearchRequest(origin=DELHI, radius_km=12.5)
        ).compile(dialect=postgresql.dialect())
        assert 12500.0 in compiled.params.values()

    def test_service_id_filter(self):
        sql = _sql(
            SearchRequest(
                origin=DELHI, radius_km=10, service_filter=ServiceFilter(service_id=3)
            )
        )
        assert "EXISTS" in sql
        assert "partner_services" in sql
        assert "services.id" in sql

    def test_emergency_filter(self):
        compiled = nearby_partners_query(
            SearchRequest(
                origin=DELHI,
                radius_km=20,
                service_filter=ServiceFilter(
                    emergency_type="flat_tire", require_services=True
                ),
            )
        ).compile(dialect=postgresql.dialect())
        sql = str(compiled)
        assert "ILIKE" in sql
        assert "services.category" in sql
        assert "%flat%tire%" in compiled.params.values()

    def test_separator_only_emergency_type_adds_no_name_filter(self):
        compiled = nearby_partners_query(
            SearchRequest(
                origin=DELHI,
                radius_km=20,
                service_filter=ServiceFilter(emergency_type="_", require_services=True),
            )
        ).compile(dialect=postgresql.dialect())
        sql = str(compiled)
        assert "ILIKE" not in sql
        assert "EXISTS" in sql
        assert "%%" not in compiled.params.values()

    def test_invalid_origin_rejected_before_building(self):
        with pytest.raises(InvalidCoordinates):
            nearby_partners_query(SearchRequest(origin=GeoPoint(95, 0), radius_km=10))

    def test_invalid_radius_rejected_before_building(self):
        with pytest.raises(InvalidRadius):
            nearby_partners_query(SearchRequest(origin=DELHI, radius_km=-1))


class TestEmergencyNamePattern:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("breakdown", "%breakdown%"),
            ("flat_tire", "%flat%tire%"),
            ("out-of-fuel", "%out%of%fuel%"),
            ("100%", "%100%"),
            ("_", None),
            ("--", None),
            ("", None),
        ],
    )
    def test_pattern(self, raw, expected):
        assert emergency_name_pattern(raw) == expected


class TestPartnerRepository:
    @pytest.mark.asyncio
    async def test_rows_become_candidates(self):
        located = SimpleNamespace(latitude=28.6, longitude=77.2, rating=4.5)
        unlocated = SimpleNamespace(latitude=None, longitude=None, rating=None)

        result = MagicMock()
        result.scalars.return_value.unique.return_value.all.return_value = [
            located,
            unlocated,
        ]
        session = AsyncMock()
        session.execute.return_value = result

        candidates = await PartnerRepository(session).find_candidates(
            SearchRequest(origin=DELHI, radius_km=10)
        )
        assert candidates[0].partner is located
        assert candidates[0].location == GeoPoint(28.6, 77.2)
        assert candidates[0].rating == 4.5
        assert candidates[1].location is None
        assert candidates[1].rating == 0.0

    @pytest.mark.asyncio
    async def test_database_error_becomes_storage_failure(self):
        session = AsyncMock()
        session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )
        with pytest.raises(StorageQueryFailure) as excinfo:
            await PartnerRepository(session).find_candidates(
                SearchRequest(origin=DELHI, radius_km=10)
            )
        assert "connection refused" not in excinfo.value.message

    @pytest.mark.asyncio
    async def test_invalid_search_does_not_touch_session(self):
        session = AsyncMock()
        with pytest.raises(InvalidCoordinates):
            await PartnerRepository(session).find_candidates(
                SearchRequest(origin=GeoPoint(0, 200), radius_km=10)
            )
        session.execute.assert_not_awaited()


class TestRowMapping:
    def test_partner_candidate(self):
        row = SimpleNamespace(latitude=23.02, longitude=72.57, rating=3.5)
        candidate = partner_candidate(row)
        assert candidate.location == GeoPoint(23.02, 72.57)

    def test_emergency_entity_from_string_columns(self):
        row = SimpleNamespace(
            id=7,
            user_id=1,
            emergency_type="breakdown",
            priority="high",
            latitude=28.6,
            longitude=77.2,
            status="in_progress",
            assigned_partner_id=3,
            cancellation_reason=None,
            created_at=None,
        )
        entity = emergency_entity(row)
        assert entity.status is EmergencyStatus.IN_PROGRESS
        assert entity.emergency_type is EmergencyType.BREAKDOWN
        assert entity.location == GeoPoint(28.6, 77.2)
