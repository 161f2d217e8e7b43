"""Domain enumerations and state-transition rules."""

import enum


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class BusinessType(str, enum.Enum):
    GARAGE = "garage"
    TIRE_SHOP = "tire_shop"
    PETROL_PUMP = "petrol_pump"
    EV_CHARGING = "ev_charging"
    BATTERY_SWAP = "battery_swap"
    CAR_WASH = "car_wash"
    TOWING = "towing"
    EMERGENCY_SERVICE = "emergency_service"
    OTHER = "other"


class ServiceCategory(str, enum.Enum):
    REPAIR = "repair"
    MAINTENANCE = "maintenance"
    EMERGENCY = "emergency"
    CLEANING = "cleaning"
    FUEL = "fuel"
    BATTERY = "battery"
    OTHER = "other"


class EmergencyType(str, enum.Enum):
    BREAKDOWN = "breakdown"
    ACCIDENT = "accident"
    FUEL_EMPTY = "fuel_empty"
    BATTERY_DEAD = "battery_dead"
    FLAT_TIRE = "flat_tire"
    MEDICAL = "medical"
    OTHER = "other"


class EmergencyPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class EmergencyStatus(str, enum.Enum):
    ACTIVE = "active"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


# State machine: maps current status -> set of valid next statuses
EMERGENCY_TRANSITIONS: dict[EmergencyStatus, set[EmergencyStatus]] = {
    EmergencyStatus.ACTIVE: {EmergencyStatus.ASSIGNED, EmergencyStatus.CANCELLED},
    EmergencyStatus.ASSIGNED: {
        EmergencyStatus.IN_PROGRESS,
        EmergencyStatus.CANCELLED,
    },
    EmergencyStatus.IN_PROGRESS: {EmergencyStatus.RESOLVED},
    EmergencyStatus.RESOLVED: set(),
    EmergencyStatus.CANCELLED: set(),
}

# A user may hold at most one emergency in any of these statuses.
OPEN_EMERGENCY_STATUSES = frozenset(
    {
        EmergencyStatus.ACTIVE,
        EmergencyStatus.ASSIGNED,
        EmergencyStatus.IN_PROGRESS,
    }
)
