"""Tests for the booking allocation write path."""

from datetime import date, datetime, timedelta

import pytest

from booking_service.clock import FixedClock
from booking_service.errors import (
    AddressNotFound,
    CompanyClosed,
    CompanyNotFound,
    DateTooFarInFuture,
    InternalError,
    InvalidDate,
    InvalidInput,
    ResourceNotFound,
    ServiceNotAvailableAtAddress,
    ServiceNotFound,
    SlotNotAvailable,
    TooLateToBook,
)
from booking_service.models import Bookings
from booking_service.services.allocator import AllocationRequest, BookingAllocator

from conftest import (
    ADDRESS_ID,
    COMPANY_ID,
    OTHER_ADDRESS_ID,
    OTHER_USER_ID,
    SERVICE_ID,
    TODAY,
    TOMORROW,
    USER_ID,
    add_booking,
    add_config,
    make_company,
    make_service,
    working_hours,
)


@pytest.fixture
def allocator(directory, users, clock):
    return BookingAllocator(directory, users, clock)


def request_for(
    start_time: str,
    booking_date: date = TOMORROW,
    user_id: int = USER_ID,
    **overrides,
) -> AllocationRequest:
    fields = dict(
        user_id=user_id,
        company_id=COMPANY_ID,
        address_id=ADDRESS_ID,
        service_id=SERVICE_ID,
        booking_date=booking_date,
        start_time=start_time,
    )
    fields.update(overrides)
    return AllocationRequest(**fields)


def booking_count(db) -> int:
    return db.query(Bookings).count()


class TestAllocate:

    def test_creates_confirmed_booking_with_snapshot(self, db, allocator):
        add_config(db, slot_duration_minutes=45)

        booking = allocator.allocate(db, request_for("10:00", notes="back door"))

        assert booking.id is not None
        assert booking.status == "confirmed"
        assert booking.duration_minutes == 45
        assert booking.vehicle_id == 7
        assert booking.vehicle_brand == "Toyota"
        assert booking.vehicle_model == "Camry"
        assert booking.vehicle_license_plate == "A123BC77"
        assert booking.service_name == "Full wash"
        assert booking.service_price == 1500.0
        assert booking.notes == "back door"
        assert booking.booking_date == TOMORROW
        assert booking.start_time == "10:00"

    def test_missing_price_is_stored_as_zero(self, db, directory, allocator):
        directory.add_service(make_service(price=None))
        booking = allocator.allocate(db, request_for("10:00"))
        assert booking.service_price == 0.0

    def test_occupied_slot_rejected_adjacent_slot_accepted(self, db, allocator):
        add_config(db, slot_duration_minutes=30, max_concurrent_bookings=1)
        add_booking(db, "10:00")

        with pytest.raises(SlotNotAvailable):
            allocator.allocate(db, request_for("10:00"))

        booking = allocator.allocate(db, request_for("10:30"))
        assert booking.start_time == "10:30"

    def test_partial_overlap_is_rejected(self, db, allocator):
        add_config(db)
        add_booking(db, "10:15", duration_minutes=30)

        with pytest.raises(SlotNotAvailable):
            allocator.allocate(db, request_for("10:00"))
        allocator.allocate(db, request_for("10:45"))

    def test_capacity_is_enforced(self, db, allocator):
        add_config(db, max_concurrent_bookings=3)

        for _ in range(3):
            allocator.allocate(db, request_for("10:00"))
        with pytest.raises(SlotNotAvailable):
            allocator.allocate(db, request_for("10:00"))

        assert booking_count(db) == 3

    def test_cancelled_bookings_free_capacity(self, db, allocator):
        add_config(db)
        add_booking(db, "10:00", status="cancelled_by_company")

        allocator.allocate(db, request_for("10:00"))

    def test_other_address_does_not_compete(self, db, directory, allocator):
        directory.add_service(make_service(address_ids=(ADDRESS_ID, OTHER_ADDRESS_ID)))
        add_config(db)
        add_booking(db, "10:00", address_id=OTHER_ADDRESS_ID)

        allocator.allocate(db, request_for("10:00"))

    def test_rejection_writes_nothing(self, db, allocator):
        add_config(db)
        add_booking(db, "10:00")

        with pytest.raises(SlotNotAvailable):
            allocator.allocate(db, request_for("10:00"))

        assert booking_count(db) == 1

    def test_unlimited_advance_window(self, db, allocator):
        add_config(db, advance_booking_days=0)
        booking = allocator.allocate(db, request_for("10:00", TODAY + timedelta(days=400)))
        assert booking.booking_date == TODAY + timedelta(days=400)

    def test_unlimited_advance_window_still_checks_existence(self, db, allocator):
        add_config(db, advance_booking_days=0)
        with pytest.raises(CompanyNotFound):
            allocator.allocate(db, request_for("10:00", TODAY + timedelta(days=400), company_id=999))

    def test_advance_window(self, db, allocator):
        add_config(db, advance_booking_days=30)

        with pytest.raises(DateTooFarInFuture):
            allocator.allocate(db, request_for("10:00", TODAY + timedelta(days=31)))
        allocator.allocate(db, request_for("10:00", TODAY + timedelta(days=30)))

    def test_too_late_today_fine_tomorrow(self, db, directory, users):
        add_config(db, min_booking_notice_minutes=60)
        now = datetime(TODAY.year, TODAY.month, TODAY.day, 9, 10)
        allocator = BookingAllocator(directory, users, FixedClock(now))

        with pytest.raises(TooLateToBook):
            allocator.allocate(db, request_for("10:00", TODAY))
        booking = allocator.allocate(db, request_for("10:00", TOMORROW))
        assert booking.booking_date == TOMORROW

    def test_today_after_notice_is_accepted(self, db, directory, users):
        add_config(db, min_booking_notice_minutes=60)
        now = datetime(TODAY.year, TODAY.month, TODAY.day, 9, 0)
        allocator = BookingAllocator(directory, users, FixedClock(now))

        allocator.allocate(db, request_for("10:00", TODAY))

    def test_past_date(self, db, allocator):
        with pytest.raises(InvalidDate):
            allocator.allocate(db, request_for("10:00", TODAY - timedelta(days=1)))

    def test_closed_day(self, db, directory, allocator):
        directory.add_company(make_company(hours=working_hours(sunday_closed=True)))
        with pytest.raises(CompanyClosed):
            allocator.allocate(db, request_for("10:00", date(2026, 3, 8)))

    def test_no_selected_vehicle(self, db, users, allocator):
        del users.vehicles[OTHER_USER_ID]
        with pytest.raises(ResourceNotFound):
            allocator.allocate(db, request_for("10:00", user_id=OTHER_USER_ID))
        assert booking_count(db) == 0

    def test_unknown_address(self, db, allocator):
        with pytest.raises(AddressNotFound):
            allocator.allocate(db, request_for("10:00", address_id=999))

    def test_unknown_service(self, db, allocator):
        with pytest.raises(ServiceNotFound):
            allocator.allocate(db, request_for("10:00", service_id=999))

    def test_service_not_at_address(self, db, allocator):
        with pytest.raises(ServiceNotAvailableAtAddress):
            allocator.allocate(db, request_for("10:00", address_id=OTHER_ADDRESS_ID))

    def test_directory_failure_is_internal(self, db, directory, allocator):
        directory.fail = True
        with pytest.raises(InternalError):
            allocator.allocate(db, request_for("10:00"))

    def test_internal_error_logged_without_traceback(self, db, directory, allocator, caplog):
        # The HTTP error handler logs the traceback
        directory.fail = True
        with caplog.at_level("ERROR", logger="booking_service.services.allocator"):
            with pytest.raises(InternalError):
                allocator.allocate(db, request_for("10:00"))

        records = [r for r in caplog.records if r.name == "booking_service.services.allocator"]
        assert records
        assert all(r.exc_info is None for r in records)

    @pytest.mark.parametrize("start_time", ["", "9:00", "25:00", "10:61", "ten"])
    def test_malformed_start_time(self, db, allocator, start_time):
        with pytest.raises(InvalidInput) as exc_info:
            allocator.allocate(db, request_for(start_time))
        assert exc_info.value.field == "start_time"

    @pytest.mark.parametrize("field", ["user_id", "company_id", "address_id", "service_id"])
    def test_non_positive_ids(self, db, allocator, field):
        with pytest.raises(InvalidInput) as exc_info:
            allocator.allocate(db, request_for("10:00", **{field: 0}))
        assert exc_info.value.field == field

    def test_missing_date(self, db, allocator):
        with pytest.raises(InvalidInput):
            allocator.allocate(db, request_for("10:00", booking_date=None))
