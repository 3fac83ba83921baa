# backend/booking_service/services/allocator.py
"""
Write path: admit a new booking without exceeding capacity.

Stages:
    VALIDATING          request shape
    RESOLVING_CONTEXT   directory lookups, outside the transaction
    AWAITING_LOCK       serializable tx; config, date, hours and notice
                        re-checked; active bookings read with a lock
    DECIDING            overlap count vs max concurrent
    COMMITTED / REJECTED

Either the booking is committed as confirmed or nothing is written.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..clock import SystemClock
from ..database import run_serializable
from ..errors import BookingServiceError, CompanyClosed, InternalError, InvalidInput, SlotNotAvailable
from ..models.generated import Bookings
from ..models.status import BookingStatus
from . import booking_store, validation
from .booking_store import BookingFilter
from .slots.calculator import working_hours_for_day
from .slots.config import ConfigKey, time_str_to_minutes
from .slots.overlap import TimeWindow, count_overlaps
from .slots.resolver import resolve_effective_config

logger = logging.getLogger(__name__)


class AllocationStage(str, Enum):
    VALIDATING = "validating"
    RESOLVING_CONTEXT = "resolving_context"
    AWAITING_LOCK = "awaiting_lock"
    DECIDING = "deciding"
    COMMITTED = "committed"
    REJECTED = "rejected"


@dataclass(frozen=True)
class AllocationRequest:
    user_id: int
    company_id: int
    address_id: int
    service_id: int
    booking_date: date
    start_time: str  # "HH:MM"
    notes: str | None = None


class BookingAllocator:
    """
    Args:
        directory: get_company / get_service (seller client or cache)
        users: get_selected_vehicle (user service client)
        clock: object with now(); company-local wall clock
    """

    def __init__(self, directory, users, clock=None):
        self.directory = directory
        self.users = users
        self.clock = clock or SystemClock()

    def allocate(self, db: Session, request: AllocationRequest) -> Bookings:
        stage = AllocationStage.VALIDATING
        try:
            start_minutes = self._validate(request)

            stage = AllocationStage.RESOLVING_CONTEXT
            company = validation.fetch_company(self.directory, request.company_id)
            validation.ensure_address(company, request.address_id)
            service = validation.fetch_service(self.directory, request.company_id, request.service_id)
            validation.ensure_service_at_address(service, request.address_id)
            vehicle = validation.fetch_selected_vehicle(self.users, request.user_id)

            stage = AllocationStage.AWAITING_LOCK
            now = self.clock.now()

            def locked(tx: Session) -> Bookings:
                nonlocal stage

                config = resolve_effective_config(
                    tx, ConfigKey(request.company_id, request.address_id, request.service_id)
                )
                validation.check_booking_date(request.booking_date, now.date(), config)

                if not working_hours_for_day(company, request.booking_date).is_working_day:
                    raise CompanyClosed(request.booking_date.isoformat())

                validation.check_notice(request.booking_date, start_minutes, now, config)

                bookings = booking_store.get_by_filter(
                    tx,
                    BookingFilter.for_day(request.company_id, request.address_id, request.booking_date),
                    lock_for_update=True,
                )

                stage = AllocationStage.DECIDING
                window = TimeWindow(start_minutes, config.slot_duration_minutes)
                taken = count_overlaps(window, bookings)
                if taken >= config.max_concurrent_bookings:
                    raise SlotNotAvailable(
                        f"{taken}/{config.max_concurrent_bookings} spots taken at {request.start_time}"
                    )

                logger.info(
                    f"CreateBooking: slot available, {taken}/{config.max_concurrent_bookings} spots taken"
                )

                # Snapshot of service and vehicle at creation time
                booking = Bookings(
                    user_id=request.user_id,
                    company_id=request.company_id,
                    address_id=request.address_id,
                    service_id=request.service_id,
                    vehicle_id=vehicle.id,
                    booking_date=request.booking_date,
                    start_time=request.start_time,
                    duration_minutes=config.slot_duration_minutes,
                    status=BookingStatus.CONFIRMED.value,
                    service_name=service.name,
                    service_price=service.price if service.price is not None else 0.0,
                    vehicle_brand=vehicle.brand,
                    vehicle_model=vehicle.model,
                    vehicle_license_plate=vehicle.license_plate,
                    notes=request.notes,
                )
                return booking_store.create(tx, booking)

            try:
                created = run_serializable(db, locked)
            except SQLAlchemyError as e:
                # Failures of BEGIN / COMMIT themselves; store calls wrap their own
                logger.error(f"CreateBooking: transaction failed: {e}")
                raise InternalError("booking transaction failed") from e

        except InternalError as e:
            logger.error(f"CreateBooking: internal error at stage {stage.value}: {e}")
            raise
        except BookingServiceError as e:
            logger.warning(f"CreateBooking: {AllocationStage.REJECTED.value} at stage {stage.value}: {e}")
            raise

        stage = AllocationStage.COMMITTED
        logger.info(f"CreateBooking: successfully created booking id={created.id} ({stage.value})")
        return created

    @staticmethod
    def _validate(request: AllocationRequest) -> int:
        """Check ids, date and start time; returns start time in minutes."""
        validation.require_positive("user_id", request.user_id)
        validation.require_positive("company_id", request.company_id)
        validation.require_positive("address_id", request.address_id)
        validation.require_positive("service_id", request.service_id)

        if request.booking_date is None:
            raise InvalidInput("date", "date is required")
        if not request.start_time:
            raise InvalidInput("start_time", "start_time is required")

        try:
            return time_str_to_minutes(request.start_time)
        except ValueError as e:
            raise InvalidInput("start_time", str(e)) from e
