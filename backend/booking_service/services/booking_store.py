# backend/booking_service/services/booking_store.py
"""
Persistence for bookings.

Functions flush but never commit; the caller owns the transaction.
`get_by_filter(..., lock_for_update=True)` is the locking read used by the
allocator: FOR UPDATE on PostgreSQL, covered by BEGIN IMMEDIATE on SQLite.
"""

from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy.orm import Session

from ..database import db_errors
from ..errors import BookingNotFound
from ..models.generated import Bookings
from ..models.status import INACTIVE_STATUSES, BookingStatus


@dataclass(frozen=True)
class BookingFilter:
    """
    Narrows a booking query to one company.

    Inactive bookings are excluded unless `include_inactive` is set or an
    explicit `status` is asked for.
    """
    company_id: int
    address_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: BookingStatus | None = None
    include_inactive: bool = False

    @classmethod
    def for_day(cls, company_id: int, address_id: int, day: date) -> "BookingFilter":
        return cls(company_id=company_id, address_id=address_id, start_date=day, end_date=day)

    @property
    def is_single_day(self) -> bool:
        return self.start_date is not None and self.start_date == self.end_date


def create(db: Session, booking: Bookings) -> Bookings:
    with db_errors("create booking"):
        db.add(booking)
        db.flush()
        db.refresh(booking)
    return booking


def get_by_id(db: Session, booking_id: int, lock_for_update: bool = False) -> Bookings | None:
    with db_errors("get booking"):
        if lock_for_update:
            return db.get(Bookings, booking_id, with_for_update=True)
        return db.get(Bookings, booking_id)


def get_by_user(
    db: Session,
    user_id: int,
    status: BookingStatus | None = None,
) -> list[Bookings]:
    """User's bookings, newest first."""
    with db_errors("list user bookings"):
        q = db.query(Bookings).filter(Bookings.user_id == user_id)
        if status is not None:
            q = q.filter(Bookings.status == status.value)
        return q.order_by(Bookings.booking_date.desc(), Bookings.start_time.desc()).all()


def get_by_filter(
    db: Session,
    flt: BookingFilter,
    lock_for_update: bool = False,
) -> list[Bookings]:
    with db_errors("list bookings"):
        q = db.query(Bookings).filter(Bookings.company_id == flt.company_id)

        if flt.address_id is not None:
            q = q.filter(Bookings.address_id == flt.address_id)
        if flt.start_date is not None:
            q = q.filter(Bookings.booking_date >= flt.start_date)
        if flt.end_date is not None:
            q = q.filter(Bookings.booking_date <= flt.end_date)

        if flt.status is not None:
            q = q.filter(Bookings.status == flt.status.value)
        elif not flt.include_inactive:
            q = q.filter(Bookings.status.notin_(sorted(INACTIVE_STATUSES)))

        if flt.is_single_day:
            q = q.order_by(Bookings.start_time.asc())
        else:
            q = q.order_by(Bookings.booking_date.desc(), Bookings.start_time.desc())

        if lock_for_update:
            q = q.with_for_update()

        return q.all()


def _get_or_raise(db: Session, booking_id: int) -> Bookings:
    booking = get_by_id(db, booking_id, lock_for_update=True)
    if booking is None:
        raise BookingNotFound(f"id={booking_id}")
    return booking


def update_status(db: Session, booking_id: int, status: BookingStatus) -> Bookings:
    booking = _get_or_raise(db, booking_id)
    with db_errors("update booking status"):
        booking.status = status.value
        db.flush()
        db.refresh(booking)
    return booking


def cancel(
    db: Session,
    booking_id: int,
    status: BookingStatus,
    reason: str | None,
    cancelled_at: datetime,
) -> Bookings:
    booking = _get_or_raise(db, booking_id)
    with db_errors("cancel booking"):
        booking.status = status.value
        booking.cancellation_reason = reason
        booking.cancelled_at = cancelled_at
        db.flush()
        db.refresh(booking)
    return booking
