"""
Domain entities and value objects.

Patterns used
-------------
- ``GeoPoint`` is the single in-memory coordinate representation.  Only the
  storage layer ever sees ``(longitude, latitude)`` order.
- **State Pattern** on ``Emergency``: enforces valid lifecycle transitions
  (ACTIVE -> ASSIGNED -> IN_PROGRESS -> RESOLVED, with CANCELLED reachable
  from ACTIVE or ASSIGNED).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import (
    EMERGENCY_TRANSITIONS,
    EmergencyPriority,
    EmergencyStatus,
    EmergencyType,
)
from .errors import InvalidStateTransition


# ── Value Object ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        """Both fields finite and inside the WGS84 ranges."""
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90 <= self.latitude <= 90
            and -180 <= self.longitude <= 180
        )

    @property
    def is_sentinel(self) -> bool:
        """``(0, 0)`` marks a partner that never set a real location."""
        return self.latitude == 0 and self.longitude == 0

    @property
    def is_rankable(self) -> bool:
        return self.is_valid and not self.is_sentinel


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Emergency:
    id: Optional[int] = None
    user_id: int = 0
    emergency_type: EmergencyType = EmergencyType.OTHER
    priority: EmergencyPriority = EmergencyPriority.MEDIUM
    location: GeoPoint = field(default_factory=lambda: GeoPoint(0, 0))
    status: EmergencyStatus = EmergencyStatus.ACTIVE
    assigned_partner_id: Optional[int] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_closed(self) -> bool:
        return self.status in (EmergencyStatus.RESOLVED, EmergencyStatus.CANCELLED)

    def transition_to(self, new_status: EmergencyStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = EMERGENCY_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot change emergency from {self.status.value} "
                f"to {new_status.value}"
            )
        self.status = new_status

    def cancel(self, reason: Optional[str] = None) -> None:
        self.transition_to(EmergencyStatus.CANCELLED)
        self.cancellation_reason = reason or "Cancelled by user"
