# backend/booking_service/services/slots/config.py
"""
Capacity configuration for slots calculation.

A config row is keyed by (company_id, address_id?, service_id?). Which of
the optional ids are set decides its specificity level:

    service_at_address  (address + service)   most specific
    address             (address only)
    service             (service only)
    global              (neither)             least specific
"""

from dataclasses import dataclass
from enum import Enum


DEFAULT_SLOT_DURATION_MINUTES = 30
DEFAULT_MAX_CONCURRENT_BOOKINGS = 1
DEFAULT_ADVANCE_BOOKING_DAYS = 0  # unlimited
DEFAULT_MIN_BOOKING_NOTICE_MINUTES = 60

# Inclusive bounds accepted by config management
SLOT_DURATION_RANGE = (1, 480)
MAX_CONCURRENT_RANGE = (1, 100)
ADVANCE_DAYS_RANGE = (0, 365)
MIN_NOTICE_RANGE = (0, 10080)  # one week


class ConfigLevel(str, Enum):
    SERVICE_AT_ADDRESS = "service_at_address"
    ADDRESS = "address"
    SERVICE = "service"
    GLOBAL = "global"


def level_for(address_id: int | None, service_id: int | None) -> ConfigLevel:
    if address_id is not None and service_id is not None:
        return ConfigLevel.SERVICE_AT_ADDRESS
    if address_id is not None:
        return ConfigLevel.ADDRESS
    if service_id is not None:
        return ConfigLevel.SERVICE
    return ConfigLevel.GLOBAL


@dataclass(frozen=True)
class ConfigKey:
    """
    Lookup key for a capacity config.

    None means "unset" (applies to all addresses / services); ids are
    always positive, so there is no confusion between 0 and absent.
    """
    company_id: int
    address_id: int | None = None
    service_id: int | None = None

    @property
    def level(self) -> ConfigLevel:
        return level_for(self.address_id, self.service_id)

    def candidates(self) -> list["ConfigKey"]:
        """
        Keys to probe, most specific first.

        A level is skipped when the id it needs was not supplied.
        """
        keys = []
        if self.address_id is not None and self.service_id is not None:
            keys.append(ConfigKey(self.company_id, self.address_id, self.service_id))
        if self.address_id is not None:
            keys.append(ConfigKey(self.company_id, self.address_id, None))
        if self.service_id is not None:
            keys.append(ConfigKey(self.company_id, None, self.service_id))
        keys.append(ConfigKey(self.company_id, None, None))
        return keys


@dataclass(frozen=True)
class CapacityConfig:
    """
    Effective capacity rule for a slot lookup.

    Attributes:
        slot_duration_minutes: Length of every slot in the day grid
        max_concurrent_bookings: Active bookings allowed per overlapping window
        advance_booking_days: How far ahead bookings are accepted (0 = unlimited)
        min_booking_notice_minutes: Minimum lead time for same-day bookings
    """
    slot_duration_minutes: int
    max_concurrent_bookings: int
    advance_booking_days: int
    min_booking_notice_minutes: int

    # Source row; None for the built-in defaults
    id: int | None = None
    company_id: int | None = None
    address_id: int | None = None
    service_id: int | None = None

    @classmethod
    def from_row(cls, row) -> "CapacityConfig":
        return cls(
            slot_duration_minutes=row.slot_duration_minutes,
            max_concurrent_bookings=row.max_concurrent_bookings,
            advance_booking_days=row.advance_booking_days,
            min_booking_notice_minutes=row.min_booking_notice_minutes,
            id=row.id,
            company_id=row.company_id,
            address_id=row.address_id,
            service_id=row.service_id,
        )

    @property
    def is_default(self) -> bool:
        return self.id is None

    @property
    def level(self) -> ConfigLevel:
        return level_for(self.address_id, self.service_id)

    @property
    def has_advance_limit(self) -> bool:
        return self.advance_booking_days > 0

    @property
    def supports_parallel_bookings(self) -> bool:
        return self.max_concurrent_bookings > 1


def default_capacity_config(company_id: int | None = None) -> CapacityConfig:
    """Built-in config used when no hierarchy level has a row."""
    return CapacityConfig(
        slot_duration_minutes=DEFAULT_SLOT_DURATION_MINUTES,
        max_concurrent_bookings=DEFAULT_MAX_CONCURRENT_BOOKINGS,
        advance_booking_days=DEFAULT_ADVANCE_BOOKING_DAYS,
        min_booking_notice_minutes=DEFAULT_MIN_BOOKING_NOTICE_MINUTES,
        company_id=company_id,
    )


# ── Time helpers ─────────────────────────────────────────────────────────


def time_str_to_minutes(time_str: str) -> int:
    """
    Convert "HH:MM" to minutes since midnight.

    Raises ValueError on anything that is not a valid 24h time.
    """
    parts = time_str.split(":")
    if len(parts) != 2 or not all(p.isdigit() and len(p) == 2 for p in parts):
        raise ValueError(f"time must be HH:MM, got {time_str!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if hour > 23 or minute > 59:
        raise ValueError(f"time out of range: {time_str!r}")
    return hour * 60 + minute


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
