# backend/booking_service/services/bookings.py
"""
Booking reads and lifecycle changes after allocation.

Owners see and cancel their own bookings; company managers see and manage
every booking of the company. Status writes run in a serializable
transaction and re-check the row under lock, so they queue behind a
running allocation instead of failing.
"""

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from ..clock import SystemClock
from ..database import db_errors, run_serializable
from ..errors import (
    AccessDenied,
    BookingCannotBeCancelled,
    BookingNotFound,
    InvalidInput,
    StatusChangeNotAllowed,
)
from ..models.generated import Bookings
from ..models.status import CANCELLED_STATUSES, BookingStatus, is_active_status, parse_status
from . import booking_store, validation
from .booking_store import BookingFilter

logger = logging.getLogger(__name__)

MAX_CANCELLATION_REASON_LENGTH = 500


@dataclass(frozen=True)
class CompanyBookingsQuery:
    company_id: int
    address_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: str | None = None
    include_inactive: bool = False


def _parse_status_or_invalid(value: str) -> BookingStatus:
    try:
        return parse_status(value)
    except ValueError as e:
        raise InvalidInput("status", f"unknown status {value!r}") from e


class BookingQueries:
    def __init__(self, directory, clock=None):
        self.directory = directory
        self.clock = clock or SystemClock()

    def _get_or_raise(self, db: Session, booking_id: int, lock_for_update: bool = False) -> Bookings:
        booking = booking_store.get_by_id(db, booking_id, lock_for_update)
        if booking is None:
            logger.warning(f"Booking id={booking_id} not found")
            raise BookingNotFound(f"id={booking_id}")
        return booking

    def get_by_id(self, db: Session, booking_id: int, user_id: int) -> Bookings:
        """Visible to its owner and to managers of its company."""
        booking = self._get_or_raise(db, booking_id)
        if booking.user_id != user_id:
            validation.require_manager(self.directory, booking.company_id, user_id)
        return booking

    def get_user_bookings(
        self,
        db: Session,
        user_id: int,
        status: str | None = None,
    ) -> list[Bookings]:
        parsed = _parse_status_or_invalid(status) if status is not None else None
        bookings = booking_store.get_by_user(db, user_id, parsed)
        logger.info(f"GetUserBookings: {len(bookings)} bookings for user={user_id}")
        return bookings

    def get_company_bookings(
        self,
        db: Session,
        user_id: int,
        query: CompanyBookingsQuery,
    ) -> list[Bookings]:
        """Manager-only listing with optional address, period and status filters."""
        validation.require_manager(self.directory, query.company_id, user_id)

        if query.start_date and query.end_date and query.start_date > query.end_date:
            raise InvalidInput("start_date", "start_date must not be after end_date")

        flt = BookingFilter(
            company_id=query.company_id,
            address_id=query.address_id,
            start_date=query.start_date,
            end_date=query.end_date,
            status=_parse_status_or_invalid(query.status) if query.status is not None else None,
            include_inactive=query.include_inactive,
        )
        bookings = booking_store.get_by_filter(db, flt)
        logger.info(f"GetCompanyBookings: {len(bookings)} bookings for company={query.company_id}")
        return bookings

    def cancel(
        self,
        db: Session,
        booking_id: int,
        user_id: int,
        reason: str | None = None,
    ) -> Bookings:
        """
        Cancel a pending or confirmed booking.

        The owner cancels as the user, a company manager as the company;
        anyone else gets AccessDenied.
        """
        if reason is not None and len(reason) > MAX_CANCELLATION_REASON_LENGTH:
            raise InvalidInput(
                "cancellation_reason",
                f"must be at most {MAX_CANCELLATION_REASON_LENGTH} characters",
            )

        booking = self._get_or_raise(db, booking_id)
        if booking.user_id == user_id:
            new_status = BookingStatus.CANCELLED_BY_USER
        else:
            try:
                validation.require_manager(self.directory, booking.company_id, user_id)
            except AccessDenied:
                logger.warning(f"Cancel: access denied for user={user_id} to booking id={booking_id}")
                raise
            new_status = BookingStatus.CANCELLED_BY_COMPANY

        return self._cancel(db, booking_id, new_status, reason)

    def update_status(
        self,
        db: Session,
        booking_id: int,
        user_id: int,
        status: str,
    ) -> Bookings:
        """
        Manager-only status change.

        Cancelled statuses go through the cancellation rules. An inactive
        booking cannot be made active again: it would take a spot without
        a capacity check.
        """
        booking = self._get_or_raise(db, booking_id)
        validation.require_manager(self.directory, booking.company_id, user_id)

        new_status = _parse_status_or_invalid(status)
        if new_status.value in CANCELLED_STATUSES:
            return self._cancel(db, booking_id, new_status, None)

        def locked(tx: Session) -> Bookings:
            current = self._get_or_raise(tx, booking_id, lock_for_update=True)
            if not is_active_status(current.status) and is_active_status(new_status.value):
                logger.warning(
                    f"UpdateStatus: booking id={booking_id} {current.status} -> {new_status.value} rejected"
                )
                raise StatusChangeNotAllowed(f"{current.status} -> {new_status.value}")
            return booking_store.update_status(tx, booking_id, new_status)

        with db_errors("update booking status"):
            booking = run_serializable(db, locked)
        logger.info(f"UpdateStatus: booking id={booking_id} -> {new_status.value}")
        return booking

    def _cancel(
        self,
        db: Session,
        booking_id: int,
        new_status: BookingStatus,
        reason: str | None,
    ) -> Bookings:
        cancelled_at = self.clock.now()

        def locked(tx: Session) -> Bookings:
            current = self._get_or_raise(tx, booking_id, lock_for_update=True)
            if not current.can_be_cancelled:
                logger.warning(f"Cancel: booking id={booking_id} cannot be cancelled, status={current.status}")
                raise BookingCannotBeCancelled(f"status is {current.status}")
            return booking_store.cancel(tx, booking_id, new_status, reason, cancelled_at)

        with db_errors("cancel booking"):
            booking = run_serializable(db, locked)
        logger.info(f"Cancel: booking id={booking_id} -> {new_status.value}")
        return booking
