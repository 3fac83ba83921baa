# backend/booking_service/services/slots/availability.py
"""
Read path: which slots exist on a day and how many spots remain in each.

Composes the config resolver, the day slot grid and overlap counting.
No transaction and no locking; the answer may be stale by the time a
booking is attempted, the allocator re-checks under lock.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.orm import Session

from ...clock import SystemClock
from .. import booking_store, validation
from ..booking_store import BookingFilter
from .calculator import generate_day_slots, working_hours_for_day
from .config import CapacityConfig, ConfigKey
from .overlap import TimeWindow, count_overlaps
from .resolver import resolve_effective_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailableSlot:
    start_time: str
    duration_minutes: int
    available_spots: int
    total_spots: int

    @property
    def is_full(self) -> bool:
        return self.available_spots == 0

    @property
    def is_fully_available(self) -> bool:
        return self.available_spots == self.total_spots

    @property
    def is_partially_available(self) -> bool:
        return 0 < self.available_spots < self.total_spots

    @property
    def occupancy_rate(self) -> float:
        """Share of taken spots, 0.0 .. 1.0."""
        if self.total_spots <= 0:
            return 0.0
        return (self.total_spots - self.available_spots) / self.total_spots


@dataclass
class DayAvailability:
    company_id: int
    address_id: int
    service_id: int
    date: date
    config: CapacityConfig
    slots: list[AvailableSlot] = field(default_factory=list)


class AvailabilityCalculator:
    """
    Args:
        directory: object with get_company / get_service (seller client or cache)
        clock: object with now(); company-local wall clock
    """

    def __init__(self, directory, clock=None):
        self.directory = directory
        self.clock = clock or SystemClock()

    def execute(
        self,
        db: Session,
        company_id: int,
        address_id: int,
        service_id: int,
        target_date: date,
    ) -> DayAvailability:
        validation.require_positive("company_id", company_id)
        validation.require_positive("address_id", address_id)
        validation.require_positive("service_id", service_id)

        logger.info(
            f"GetAvailableSlots: company={company_id}, address={address_id}, "
            f"service={service_id}, date={target_date.isoformat()}"
        )

        # Step 1: Directory checks
        company = validation.fetch_company(self.directory, company_id)
        validation.ensure_address(company, address_id)
        service = validation.fetch_service(self.directory, company_id, service_id)
        validation.ensure_service_at_address(service, address_id)

        # Step 2: Effective config and date limits
        config = resolve_effective_config(db, ConfigKey(company_id, address_id, service_id))
        now = self.clock.now()
        validation.check_booking_date(target_date, now.date(), config)

        result = DayAvailability(
            company_id=company_id,
            address_id=address_id,
            service_id=service_id,
            date=target_date,
            config=config,
        )

        # Step 3: Closed day is an empty answer, not an error
        day = working_hours_for_day(company, target_date)
        if not day.is_working_day:
            logger.info(f"GetAvailableSlots: company {company_id} is closed on {target_date.isoformat()}")
            return result

        starts = generate_day_slots(
            day,
            config.slot_duration_minutes,
            target_date,
            now,
            config.min_booking_notice_minutes,
        )
        if not starts:
            return result

        # Step 4: Subtract existing bookings
        bookings = booking_store.get_by_filter(
            db, BookingFilter.for_day(company_id, address_id, target_date)
        )

        total = config.max_concurrent_bookings
        for start in starts:
            window = TimeWindow.at(start, config.slot_duration_minutes)
            taken = count_overlaps(window, bookings)
            result.slots.append(
                AvailableSlot(
                    start_time=start,
                    duration_minutes=config.slot_duration_minutes,
                    available_spots=max(0, total - taken),
                    total_spots=total,
                )
            )

        return result
