from .generated import Base, Bookings, CompanySlotsConfig, metadata
from .status import (
    CANCELLABLE_STATUSES,
    CANCELLED_STATUSES,
    INACTIVE_STATUSES,
    BookingStatus,
    is_active_status,
    parse_status,
)

__all__ = [
    "Base",
    "metadata",
    "Bookings",
    "CompanySlotsConfig",
    "BookingStatus",
    "CANCELLED_STATUSES",
    "INACTIVE_STATUSES",
    "CANCELLABLE_STATUSES",
    "is_active_status",
    "parse_status",
]
