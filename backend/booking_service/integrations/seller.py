"""
backend/booking_service/integrations/seller.py

Company/service directory, read-only.

GET /internal/companies/{company_id}
GET /internal/companies/{company_id}/services/{service_id}
"""

from datetime import date

from pydantic import BaseModel, Field

from .http import InternalApiClient


class CompanyNotFoundError(Exception):
    pass


class ServiceNotFoundError(Exception):
    pass


class DaySchedule(BaseModel):
    is_open: bool = False
    open_time: str | None = None  # "HH:MM"
    close_time: str | None = None

    @property
    def is_working_day(self) -> bool:
        return self.is_open and bool(self.open_time) and bool(self.close_time)


class WorkingHours(BaseModel):
    monday: DaySchedule = Field(default_factory=DaySchedule)
    tuesday: DaySchedule = Field(default_factory=DaySchedule)
    wednesday: DaySchedule = Field(default_factory=DaySchedule)
    thursday: DaySchedule = Field(default_factory=DaySchedule)
    friday: DaySchedule = Field(default_factory=DaySchedule)
    saturday: DaySchedule = Field(default_factory=DaySchedule)
    sunday: DaySchedule = Field(default_factory=DaySchedule)

    def for_date(self, target_date: date) -> DaySchedule:
        days = (
            self.monday, self.tuesday, self.wednesday, self.thursday,
            self.friday, self.saturday, self.sunday,
        )
        return days[target_date.weekday()]


class Address(BaseModel):
    id: int
    city: str | None = None
    address: str | None = None


class Company(BaseModel):
    id: int
    name: str = ""
    addresses: list[Address] = Field(default_factory=list)
    working_hours: WorkingHours = Field(default_factory=WorkingHours)
    manager_ids: list[int] = Field(default_factory=list)

    def has_address(self, address_id: int) -> bool:
        return any(a.id == address_id for a in self.addresses)

    def is_manager(self, user_id: int) -> bool:
        return user_id in self.manager_ids


class Service(BaseModel):
    id: int
    company_id: int
    name: str
    price: float | None = None
    duration_minutes: int | None = None
    address_ids: list[int] = Field(default_factory=list)

    def is_available_at(self, address_id: int) -> bool:
        return address_id in self.address_ids


class SellerServiceClient(InternalApiClient):
    """HTTP client for the seller (company directory) service."""

    def get_company(self, company_id: int) -> Company:
        resp = self._get(f"/internal/companies/{company_id}")
        if resp.status_code == 404:
            raise CompanyNotFoundError(f"company {company_id}")
        return self._parse(Company, resp)

    def get_service(self, company_id: int, service_id: int) -> Service:
        resp = self._get(f"/internal/companies/{company_id}/services/{service_id}")
        if resp.status_code == 404:
            raise ServiceNotFoundError(f"service {service_id} of company {company_id}")
        return self._parse(Service, resp)
