# backend/booking_service/services/validation.py
"""
Checks shared by the availability, allocation and management flows.

Collaborator exceptions are translated here by type: not-found answers
become the matching NotFound error, anything else becomes InternalError.
"""

import logging
from datetime import date, datetime, timedelta

from ..errors import (
    AccessDenied,
    AddressNotFound,
    CompanyNotFound,
    DateTooFarInFuture,
    InternalError,
    InvalidDate,
    InvalidInput,
    ResourceNotFound,
    ServiceNotAvailableAtAddress,
    ServiceNotFound,
    TooLateToBook,
)
from ..integrations.http import DirectoryError
from ..integrations.seller import Company, CompanyNotFoundError, Service, ServiceNotFoundError
from ..integrations.users import ResourceNotSelectedError, Vehicle
from .slots.config import CapacityConfig

logger = logging.getLogger(__name__)


def require_positive(field: str, value: int | None) -> None:
    if value is None or value <= 0:
        raise InvalidInput(field, f"{field} must be positive")


# ── Directory lookups ────────────────────────────────────────────────────


def fetch_company(directory, company_id: int) -> Company:
    try:
        return directory.get_company(company_id)
    except CompanyNotFoundError as e:
        raise CompanyNotFound(f"id={company_id}") from e
    except DirectoryError as e:
        logger.error(f"Failed to get company id={company_id}: {e}")
        raise InternalError("failed to get company") from e


def fetch_service(directory, company_id: int, service_id: int) -> Service:
    try:
        return directory.get_service(company_id, service_id)
    except ServiceNotFoundError as e:
        raise ServiceNotFound(f"id={service_id}") from e
    except DirectoryError as e:
        logger.error(f"Failed to get service id={service_id}: {e}")
        raise InternalError("failed to get service") from e


def fetch_selected_vehicle(users, user_id: int) -> Vehicle:
    try:
        return users.get_selected_vehicle(user_id)
    except ResourceNotSelectedError as e:
        raise ResourceNotFound(f"user_id={user_id}") from e
    except DirectoryError as e:
        logger.error(f"Failed to get selected vehicle for user id={user_id}: {e}")
        raise InternalError("failed to get selected vehicle") from e


def require_manager(directory, company_id: int, user_id: int) -> Company:
    """The company, if `user_id` is one of its managers; AccessDenied otherwise."""
    company = fetch_company(directory, company_id)
    if not company.is_manager(user_id):
        logger.warning(f"User {user_id} is not a manager of company {company_id}")
        raise AccessDenied(f"user {user_id} is not a manager of company {company_id}")
    return company


def ensure_address(company: Company, address_id: int) -> None:
    if not company.has_address(address_id):
        raise AddressNotFound(f"id={address_id} in company id={company.id}")


def ensure_service_at_address(service: Service, address_id: int) -> None:
    if not service.is_available_at(address_id):
        raise ServiceNotAvailableAtAddress(f"service id={service.id}, address id={address_id}")


# ── Date and time rules ──────────────────────────────────────────────────


def check_booking_date(target_date: date, today: date, config: CapacityConfig) -> None:
    """
    Past dates are invalid; with an advance limit, at most
    `advance_booking_days` after today (inclusive).
    """
    if target_date < today:
        raise InvalidDate(f"{target_date.isoformat()} is in the past")

    if not config.has_advance_limit:
        return

    max_date = today + timedelta(days=config.advance_booking_days)
    if target_date > max_date:
        raise DateTooFarInFuture(
            f"can only book {config.advance_booking_days} days in advance"
        )


def check_notice(
    target_date: date,
    start_minutes: int,
    now: datetime,
    config: CapacityConfig,
) -> None:
    """Same-day bookings must start at least the notice period from now."""
    if target_date != now.date():
        return

    min_allowed = now.hour * 60 + now.minute + config.min_booking_notice_minutes
    if start_minutes < min_allowed:
        raise TooLateToBook(
            f"must book at least {config.min_booking_notice_minutes} minutes in advance"
        )
