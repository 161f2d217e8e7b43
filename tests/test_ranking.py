"""Unit tests for partner ranking (filtering, ordering, truncation)."""

import math

from roadside.domain.distance import EARTH_RADIUS_KM, haversine_km
from roadside.domain.entities import GeoPoint
from roadside.domain.ranking import MAX_RESULTS, PartnerCandidate, rank_partners

DELHI = GeoPoint(28.6139, 77.2090)
AHMEDABAD = GeoPoint(23.0225, 72.5714)
EQUATOR = GeoPoint(0.0, 10.0)


def _north_of(origin: GeoPoint, km: float) -> GeoPoint:
    """Point *km* due north (same longitude => exact Haversine distance)."""
    return GeoPoint(origin.latitude + math.degrees(km / EARTH_RADIUS_KM), origin.longitude)


def _south_of(origin: GeoPoint, km: float) -> GeoPoint:
    return GeoPoint(origin.latitude - math.degrees(km / EARTH_RADIUS_KM), origin.longitude)


def _candidate(name, location, rating=4.0):
    return PartnerCandidate(partner=name, location=location, rating=rating)


class TestFiltering:
    def test_partner_beyond_radius_is_excluded(self):
        # Connaught Place -> Rohini is ~14 km, outside a 10 km search
        ranked = rank_partners(
            [_candidate("rohini", GeoPoint(28.7041, 77.1025))], DELHI, 10
        )
        assert ranked == []

    def test_partner_inside_radius_is_kept(self):
        ranked = rank_partners(
            [_candidate("rohini", GeoPoint(28.7041, 77.1025))], DELHI, 20
        )
        assert [r.partner for r in ranked] == ["rohini"]

    def test_radius_boundary_is_inclusive(self):
        target = GeoPoint(28.7041, 77.1025)
        exact = haversine_km(DELHI, target)
        ranked = rank_partners([_candidate("edge", target)], DELHI, exact)
        assert [r.partner for r in ranked] == ["edge"]

    def test_missing_location_is_skipped(self):
        ranked = rank_partners([_candidate("nowhere", None)], DELHI, 50)
        assert ranked == []

    def test_sentinel_location_is_skipped(self):
        origin = GeoPoint(0.0, 0.01)
        ranked = rank_partners([_candidate("zero", GeoPoint(0.0, 0.0))], origin, 50)
        assert ranked == []

    def test_out_of_range_location_is_skipped(self):
        ranked = rank_partners([_candidate("bad", GeoPoint(95.0, 77.2))], DELHI, 20_000)
        assert ranked == []

    def test_empty_candidates(self):
        assert rank_partners([], DELHI, 10) == []


class TestOrdering:
    def test_sorted_by_distance(self):
        candidates = [
            _candidate("far", _north_of(DELHI, 8.0), rating=5.0),
            _candidate("near", _north_of(DELHI, 1.0), rating=1.0),
            _candidate("mid", _south_of(DELHI, 4.0), rating=3.0),
        ]
        ranked = rank_partners(candidates, DELHI, 10)
        assert [r.partner for r in ranked] == ["near", "mid", "far"]
        distances = [r.distance_km for r in ranked]
        assert distances == sorted(distances)

    def test_same_location_ranked_first_regardless_of_rating(self):
        candidates = [
            _candidate("rated", _north_of(AHMEDABAD, 0.5), rating=5.0),
            _candidate("here", AHMEDABAD, rating=0.0),
        ]
        ranked = rank_partners(candidates, AHMEDABAD, 10)
        assert ranked[0].partner == "here"
        assert ranked[0].rounded_distance == 0.00

    def test_equal_distance_higher_rating_first(self):
        candidates = [
            _candidate("low", _north_of(EQUATOR, 3.0), rating=3.0),
            _candidate("high", _south_of(EQUATOR, 3.0), rating=4.5),
        ]
        ranked = rank_partners(candidates, EQUATOR, 10)
        assert [r.partner for r in ranked] == ["high", "low"]
        assert ranked[0].rounded_distance == ranked[1].rounded_distance == 3.0

    def test_near_equal_distance_uses_rounded_tie_break(self):
        candidates = [
            _candidate("closer_low", _north_of(DELHI, 3.001), rating=2.0),
            _candidate("further_high", _south_of(DELHI, 3.004), rating=4.9),
        ]
        ranked = rank_partners(candidates, DELHI, 10)
        assert [r.partner for r in ranked] == ["further_high", "closer_low"]

    def test_different_rounded_distance_ignores_rating(self):
        candidates = [
            _candidate("a", _north_of(DELHI, 2.0), rating=1.0),
            _candidate("b", _south_of(DELHI, 2.5), rating=5.0),
        ]
        ranked = rank_partners(candidates, DELHI, 10)
        assert [r.partner for r in ranked] == ["a", "b"]


class TestTruncation:
    def test_never_more_than_fifty(self):
        candidates = [
            _candidate(i, _north_of(DELHI, 0.1 * i)) for i in range(75)
        ]
        ranked = rank_partners(candidates, DELHI, 20)
        assert len(ranked) == MAX_RESULTS == 50
        # the nearest fifty survive
        assert [r.partner for r in ranked] == list(range(50))

    def test_limit_above_maximum_is_capped(self):
        candidates = [_candidate(i, _north_of(DELHI, 0.1 * i)) for i in range(60)]
        assert len(rank_partners(candidates, DELHI, 20, limit=500)) == 50

    def test_smaller_limit(self):
        candidates = [_candidate(i, _north_of(DELHI, 0.1 * i)) for i in range(10)]
        ranked = rank_partners(candidates, DELHI, 20, limit=3)
        assert [r.partner for r in ranked] == [0, 1, 2]
