"""
Error taxonomy shared by every component.

Each exception carries a closed `ErrorKind`; callers branch on the class or
on `kind`, never on message text. Downstream failures are wrapped in
`InternalError` with `raise ... from exc` so the original cause survives.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    INVALID_INPUT = "invalid_input"
    BUSINESS_RULE = "business_rule"
    INTERNAL = "internal"


class BookingServiceError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL
    code: str = "internal"
    message: str = "internal error"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


# ── Not found ────────────────────────────────────────────────────────────


class NotFoundError(BookingServiceError):
    kind = ErrorKind.NOT_FOUND
    code = "not_found"
    message = "not found"


class CompanyNotFound(NotFoundError):
    code = "company_not_found"
    message = "company not found"


class AddressNotFound(NotFoundError):
    code = "address_not_found"
    message = "address not found"


class ServiceNotFound(NotFoundError):
    code = "service_not_found"
    message = "service not found"


class ConfigNotFound(NotFoundError):
    code = "config_not_found"
    message = "config not found"


class BookingNotFound(NotFoundError):
    code = "booking_not_found"
    message = "booking not found"


class ResourceNotFound(NotFoundError):
    code = "resource_not_found"
    message = "user has no selected vehicle"


# ── Conflict ─────────────────────────────────────────────────────────────


class ConflictError(BookingServiceError):
    kind = ErrorKind.CONFLICT
    code = "conflict"
    message = "conflict"


class SlotNotAvailable(ConflictError):
    code = "slot_not_available"
    message = "slot is not available"


class ConfigAlreadyExists(ConflictError):
    code = "config_already_exists"
    message = "config already exists"


class BookingCannotBeCancelled(ConflictError):
    code = "booking_cannot_be_cancelled"
    message = "booking cannot be cancelled"


class StatusChangeNotAllowed(ConflictError):
    code = "status_change_not_allowed"
    message = "status change not allowed"


# ── Forbidden ────────────────────────────────────────────────────────────


class AccessDenied(BookingServiceError):
    kind = ErrorKind.FORBIDDEN
    code = "access_denied"
    message = "access denied"


# ── Invalid input ────────────────────────────────────────────────────────


class InvalidInput(BookingServiceError):
    kind = ErrorKind.INVALID_INPUT
    code = "invalid_input"
    message = "invalid input data"

    def __init__(self, field: str | None = None, detail: str | None = None):
        self.field = field
        super().__init__(detail)


# ── Business rules ───────────────────────────────────────────────────────


class BusinessRuleError(BookingServiceError):
    kind = ErrorKind.BUSINESS_RULE
    code = "business_rule"
    message = "business rule violated"


class CompanyClosed(BusinessRuleError):
    code = "company_closed"
    message = "company is closed on this date"


class DateTooFarInFuture(BusinessRuleError):
    code = "date_too_far_in_future"
    message = "date is too far in the future"


class TooLateToBook(BusinessRuleError):
    code = "too_late_to_book"
    message = "too late to book this slot"


class ServiceNotAvailableAtAddress(BusinessRuleError):
    code = "service_not_available_at_address"
    message = "service is not available at this address"


class InvalidDate(BusinessRuleError):
    code = "invalid_date"
    message = "invalid booking date"


# ── Internal ─────────────────────────────────────────────────────────────


class InternalError(BookingServiceError):
    kind = ErrorKind.INTERNAL
    code = "internal"
    message = "internal error"
