from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED_BY_USER = "cancelled_by_user"
    CANCELLED_BY_COMPANY = "cancelled_by_company"
    NO_SHOW = "no_show"


# Raw string values: the status column is plain text
INACTIVE_STATUSES = frozenset({
    BookingStatus.CANCELLED_BY_USER.value,
    BookingStatus.CANCELLED_BY_COMPANY.value,
    BookingStatus.NO_SHOW.value,
})

CANCELLED_STATUSES = frozenset({
    BookingStatus.CANCELLED_BY_USER.value,
    BookingStatus.CANCELLED_BY_COMPANY.value,
})

CANCELLABLE_STATUSES = frozenset({
    BookingStatus.PENDING.value,
    BookingStatus.CONFIRMED.value,
})


def parse_status(value: str) -> BookingStatus:
    """Convert a raw status string; raises ValueError for unknown values."""
    return BookingStatus(value)


def is_active_status(value: str) -> bool:
    """A booking counts toward capacity unless cancelled or a no-show."""
    return value not in INACTIVE_STATUSES
