"""
Nearby-partner dispatch.

Both customer-facing searches (general nearby services and emergency
nearby partners) go through ``dispatch_nearby``; they differ only in the
``ServiceFilter`` they pass.  The storage handle is injected so the
orchestration runs against any object exposing ``find_candidates``.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .ranking import MAX_RESULTS, PartnerCandidate, RankedResult, rank_partners
from .search import SearchRequest, validate_search

logger = logging.getLogger(__name__)


class CandidateSource(Protocol):
    async def find_candidates(
        self, search: SearchRequest
    ) -> list[PartnerCandidate]: ...


async def dispatch_nearby(
    source: CandidateSource,
    search: SearchRequest,
    limit: int = MAX_RESULTS,
) -> list[RankedResult]:
    """Validate, query storage once, then rank.  Read-only, no retries."""
    validate_search(search)
    candidates = await source.find_candidates(search)
    ranked = rank_partners(candidates, search.origin, search.radius_km, limit)
    logger.info(
        "Nearby search at (%.5f, %.5f) r=%.1fkm: %d candidates, %d returned",
        search.origin.latitude,
        search.origin.longitude,
        search.radius_km,
        len(candidates),
        len(ranked),
    )
    return ranked
