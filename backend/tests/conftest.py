"""Shared test fixtures and helpers."""

from datetime import date, datetime, timedelta
from typing import Optional

import pytest
from sqlalchemy.orm import sessionmaker

from booking_service.clock import FixedClock
from booking_service.database import build_engine
from booking_service.integrations.http import DirectoryError
from booking_service.integrations.seller import (
    Address,
    Company,
    CompanyNotFoundError,
    DaySchedule,
    Service,
    ServiceNotFoundError,
    WorkingHours,
)
from booking_service.integrations.users import ResourceNotSelectedError, Vehicle
from booking_service.models import Base, Bookings, CompanySlotsConfig

COMPANY_ID = 1
ADDRESS_ID = 10
OTHER_ADDRESS_ID = 11
SERVICE_ID = 100
USER_ID = 1000
OTHER_USER_ID = 1001
MANAGER_ID = 500

# Monday 2026-03-02, 08:00 company-local
NOW = datetime(2026, 3, 2, 8, 0)
TODAY = NOW.date()
TOMORROW = TODAY + timedelta(days=1)


def open_day(open_time: str = "09:00", close_time: str = "12:00") -> DaySchedule:
    return DaySchedule(is_open=True, open_time=open_time, close_time=close_time)


def working_hours(
    open_time: str = "09:00",
    close_time: str = "12:00",
    sunday_closed: bool = False,
) -> WorkingHours:
    day = open_day(open_time, close_time)
    return WorkingHours(
        monday=day,
        tuesday=day,
        wednesday=day,
        thursday=day,
        friday=day,
        saturday=day,
        sunday=DaySchedule(is_open=False) if sunday_closed else day,
    )


def make_company(
    company_id: int = COMPANY_ID,
    address_ids: tuple[int, ...] = (ADDRESS_ID, OTHER_ADDRESS_ID),
    hours: Optional[WorkingHours] = None,
    manager_ids: tuple[int, ...] = (MANAGER_ID,),
) -> Company:
    return Company(
        id=company_id,
        name="Clean Car",
        addresses=[Address(id=a, city="Moscow", address=f"Street {a}") for a in address_ids],
        working_hours=hours or working_hours(),
        manager_ids=list(manager_ids),
    )


def make_service(
    service_id: int = SERVICE_ID,
    company_id: int = COMPANY_ID,
    address_ids: tuple[int, ...] = (ADDRESS_ID,),
    price: Optional[float] = 1500.0,
) -> Service:
    return Service(
        id=service_id,
        company_id=company_id,
        name="Full wash",
        price=price,
        address_ids=list(address_ids),
    )


class FakeSellerDirectory:
    """In-memory company/service directory."""

    def __init__(self):
        self.companies: dict[int, Company] = {}
        self.services: dict[tuple[int, int], Service] = {}
        self.fail = False

    def add_company(self, company: Company) -> Company:
        self.companies[company.id] = company
        return company

    def add_service(self, service: Service) -> Service:
        self.services[(service.company_id, service.id)] = service
        return service

    def get_company(self, company_id: int) -> Company:
        if self.fail:
            raise DirectoryError("seller service unavailable")
        if company_id not in self.companies:
            raise CompanyNotFoundError(f"company {company_id}")
        return self.companies[company_id]

    def get_service(self, company_id: int, service_id: int) -> Service:
        if self.fail:
            raise DirectoryError("seller service unavailable")
        if (company_id, service_id) not in self.services:
            raise ServiceNotFoundError(f"service {service_id}")
        return self.services[(company_id, service_id)]


class FakeUserRegistry:
    """In-memory selected-vehicle registry."""

    def __init__(self):
        self.vehicles: dict[int, Vehicle] = {}

    def select(self, user_id: int, vehicle_id: int, plate: str = "A123BC77") -> Vehicle:
        vehicle = Vehicle(
            id=vehicle_id,
            user_id=user_id,
            brand="Toyota",
            model="Camry",
            license_plate=plate,
        )
        self.vehicles[user_id] = vehicle
        return vehicle

    def get_selected_vehicle(self, user_id: int) -> Vehicle:
        if user_id not in self.vehicles:
            raise ResourceNotSelectedError(f"user {user_id}")
        return self.vehicles[user_id]


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'booking.db'}", busy_timeout=30)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    # Rows built by the helpers below stay readable after their commit
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def directory():
    d = FakeSellerDirectory()
    d.add_company(make_company())
    d.add_service(make_service())
    return d


@pytest.fixture
def users():
    u = FakeUserRegistry()
    u.select(USER_ID, vehicle_id=7)
    u.select(OTHER_USER_ID, vehicle_id=8, plate="B456CD77")
    return u


@pytest.fixture
def clock():
    return FixedClock(NOW)


# ── Builders ─────────────────────────────────────────────────────────────


def add_config(
    db,
    company_id: int = COMPANY_ID,
    address_id: Optional[int] = None,
    service_id: Optional[int] = None,
    slot_duration_minutes: int = 30,
    max_concurrent_bookings: int = 1,
    advance_booking_days: int = 0,
    min_booking_notice_minutes: int = 60,
) -> CompanySlotsConfig:
    row = CompanySlotsConfig(
        company_id=company_id,
        address_id=address_id,
        service_id=service_id,
        slot_duration_minutes=slot_duration_minutes,
        max_concurrent_bookings=max_concurrent_bookings,
        advance_booking_days=advance_booking_days,
        min_booking_notice_minutes=min_booking_notice_minutes,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    # End the read transaction opened by refresh
    db.commit()
    return row


def add_booking(
    db,
    start_time: str,
    booking_date: date = TOMORROW,
    duration_minutes: int = 30,
    status: str = "confirmed",
    user_id: int = USER_ID,
    company_id: int = COMPANY_ID,
    address_id: int = ADDRESS_ID,
    service_id: int = SERVICE_ID,
) -> Bookings:
    row = Bookings(
        user_id=user_id,
        company_id=company_id,
        address_id=address_id,
        service_id=service_id,
        vehicle_id=7,
        booking_date=booking_date,
        start_time=start_time,
        duration_minutes=duration_minutes,
        status=status,
        service_name="Full wash",
        service_price=1500.0,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    # End the read transaction opened by refresh
    db.commit()
    return row
