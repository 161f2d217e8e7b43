"""
Partner Ranking
===============

Turns the unordered candidate set returned by the storage layer into the
final response order:

1. Drop candidates without a usable location (missing, out of range, or the
   ``(0, 0)`` sentinel).
2. Recompute the exact great-circle distance from the search origin.
3. Re-check the radius (inclusive).  ``ST_DWithin`` on geography is close to
   but not exactly the Haversine sphere, so boundary rows can disagree.
4. Sort by distance rounded to 2 decimals ascending, then rating descending.
5. Truncate to ``limit`` (at most ``MAX_RESULTS``).

Complexity: O(n log n) in the number of candidates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .distance import haversine_km
from .entities import GeoPoint

MAX_RESULTS = 50


@dataclass(frozen=True)
class PartnerCandidate:
    partner: Any
    location: Optional[GeoPoint]
    rating: float = 0.0


@dataclass(frozen=True)
class RankedResult:
    partner: Any
    distance_km: float
    rating: float

    @property
    def rounded_distance(self) -> float:
        return round(self.distance_km, 2)


def rank_partners(
    candidates: Iterable[PartnerCandidate],
    origin: GeoPoint,
    radius_km: float,
    limit: int = MAX_RESULTS,
) -> list[RankedResult]:
    results: list[RankedResult] = []
    for candidate in candidates:
        if candidate.location is None or not candidate.location.is_rankable:
            continue
        distance = haversine_km(origin, candidate.location)
        if distance > radius_km:
            continue
        results.append(
            RankedResult(
                partner=candidate.partner,
                distance_km=distance,
                rating=candidate.rating or 0.0,
            )
        )

    results.sort(key=lambda r: (r.rounded_distance, -r.rating))
    return results[: max(0, min(limit, MAX_RESULTS))]
