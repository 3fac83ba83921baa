# backend/booking_service/services/slots/overlap.py
"""
Overlap counting.

Windows are half-open [start, end): two windows overlap iff
a.start < b.end and a.end > b.start, so touching windows do not overlap.
"""

from dataclasses import dataclass
from typing import Iterable

from ...models.status import is_active_status
from .config import time_str_to_minutes


@dataclass(frozen=True)
class TimeWindow:
    start: int  # minutes since midnight
    duration: int

    @property
    def end(self) -> int:
        return self.start + self.duration

    @classmethod
    def at(cls, start_time: str, duration_minutes: int) -> "TimeWindow":
        return cls(time_str_to_minutes(start_time), duration_minutes)

    def overlaps(self, other: "TimeWindow") -> bool:
        return self.start < other.end and self.end > other.start


def count_overlaps(window: TimeWindow, bookings: Iterable) -> int:
    """
    Number of active bookings overlapping `window`.

    `bookings` need `status`, `start_time` ("HH:MM") and `duration_minutes`.
    Inactive bookings are skipped even if the caller passed them in.
    """
    count = 0
    for booking in bookings:
        if not is_active_status(booking.status):
            continue
        if window.overlaps(TimeWindow.at(booking.start_time, booking.duration_minutes)):
            count += 1
    return count
