# backend/booking_service/services/configs.py
"""
Capacity config management for company managers.

Reads by id or through the hierarchy are public; every write and the
per-company listing require the caller to be a manager of the company.
"""

import logging
from dataclasses import asdict, dataclass, replace

from sqlalchemy.orm import Session

from ..database import db_errors, run_serializable
from ..errors import ConfigAlreadyExists, ConfigNotFound, InvalidInput
from ..models.generated import CompanySlotsConfig
from . import config_store, validation
from .slots.config import (
    ADVANCE_DAYS_RANGE,
    DEFAULT_ADVANCE_BOOKING_DAYS,
    DEFAULT_MIN_BOOKING_NOTICE_MINUTES,
    MAX_CONCURRENT_RANGE,
    MIN_NOTICE_RANGE,
    SLOT_DURATION_RANGE,
    CapacityConfig,
    ConfigKey,
)
from .slots.resolver import resolve_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigValues:
    slot_duration_minutes: int
    max_concurrent_bookings: int
    advance_booking_days: int = DEFAULT_ADVANCE_BOOKING_DAYS
    min_booking_notice_minutes: int = DEFAULT_MIN_BOOKING_NOTICE_MINUTES

    @classmethod
    def from_row(cls, row: CompanySlotsConfig) -> "ConfigValues":
        return cls(
            slot_duration_minutes=row.slot_duration_minutes,
            max_concurrent_bookings=row.max_concurrent_bookings,
            advance_booking_days=row.advance_booking_days,
            min_booking_notice_minutes=row.min_booking_notice_minutes,
        )


_LIMITS = {
    "slot_duration_minutes": SLOT_DURATION_RANGE,
    "max_concurrent_bookings": MAX_CONCURRENT_RANGE,
    "advance_booking_days": ADVANCE_DAYS_RANGE,
    "min_booking_notice_minutes": MIN_NOTICE_RANGE,
}


def validate_values(values: ConfigValues) -> None:
    for field, (low, high) in _LIMITS.items():
        value = getattr(values, field)
        if value is None or not low <= value <= high:
            raise InvalidInput(field, f"{field} must be between {low} and {high}")


class ConfigManagement:
    def __init__(self, directory):
        self.directory = directory

    # ── Read ─────────────────────────────────────────────────────────────

    def get_by_id(self, db: Session, config_id: int) -> CompanySlotsConfig:
        row = config_store.get_by_id(db, config_id)
        if row is None:
            logger.warning(f"GetByID: config id={config_id} not found")
            raise ConfigNotFound(f"id={config_id}")
        return row

    def get_with_hierarchy(self, db: Session, key: ConfigKey) -> CapacityConfig:
        """
        Effective stored config for `key`.

        Unlike the booking flows there is no fallback here: ConfigNotFound
        tells the caller that the built-in defaults would apply.
        """
        config = resolve_config(db, key)
        if config is None:
            logger.warning(
                f"GetWithHierarchy: no config for company={key.company_id}, "
                f"address={key.address_id}, service={key.service_id}"
            )
            raise ConfigNotFound(
                f"company={key.company_id} address={key.address_id} service={key.service_id}"
            )
        logger.info(f"GetWithHierarchy: config id={config.id} (level: {config.level.value})")
        return config

    def get_all_by_company(self, db: Session, company_id: int, user_id: int) -> list[CompanySlotsConfig]:
        validation.require_manager(self.directory, company_id, user_id)
        return config_store.get_all_by_company(db, company_id)

    # ── Write ────────────────────────────────────────────────────────────
    # Directory checks run before the transaction; the row work runs in a
    # serializable one so it queues behind other writers.

    def create(
        self,
        db: Session,
        user_id: int,
        key: ConfigKey,
        values: ConfigValues,
    ) -> CompanySlotsConfig:
        logger.info(
            f"Create: config for company={key.company_id}, address={key.address_id}, "
            f"service={key.service_id} by user={user_id}"
        )
        company = validation.require_manager(self.directory, key.company_id, user_id)
        validate_values(values)

        if key.address_id is not None:
            validation.ensure_address(company, key.address_id)

        if key.service_id is not None:
            service = validation.fetch_service(self.directory, key.company_id, key.service_id)
            if key.address_id is not None and not service.is_available_at(key.address_id):
                raise InvalidInput("service_id", "service is not available at this address")

        def locked(tx: Session) -> CompanySlotsConfig:
            # The unique constraint does not cover NULL address/service ids
            if config_store.get_by_key(tx, key) is not None:
                logger.warning(f"Create: config already exists for {key}")
                raise ConfigAlreadyExists(
                    f"company={key.company_id} address={key.address_id} service={key.service_id}"
                )
            return config_store.create(tx, key, **asdict(values))

        with db_errors("create slots config"):
            row = run_serializable(db, locked)
        logger.info(f"Create: config id={row.id} ({key.level.value})")
        return row

    def update(
        self,
        db: Session,
        config_id: int,
        user_id: int,
        changes: dict,
    ) -> CompanySlotsConfig:
        """Partial update; the merged values are validated as a whole."""
        row = self.get_by_id(db, config_id)
        validation.require_manager(self.directory, row.company_id, user_id)

        unknown = set(changes) - set(_LIMITS)
        if unknown:
            raise InvalidInput(sorted(unknown)[0], "field cannot be updated")

        def locked(tx: Session) -> CompanySlotsConfig:
            current = self.get_by_id(tx, config_id)
            validate_values(replace(ConfigValues.from_row(current), **changes))
            return config_store.update(tx, current, **changes)

        with db_errors("update slots config"):
            row = run_serializable(db, locked)
        logger.info(f"Update: config id={config_id} updated ({', '.join(sorted(changes)) or 'no changes'})")
        return row

    def delete(self, db: Session, config_id: int, user_id: int) -> None:
        row = self.get_by_id(db, config_id)
        validation.require_manager(self.directory, row.company_id, user_id)

        def locked(tx: Session) -> None:
            config_store.delete(tx, self.get_by_id(tx, config_id))

        with db_errors("delete slots config"):
            run_serializable(db, locked)
        logger.info(f"Delete: config id={config_id} deleted")

    def delete_by_key(self, db: Session, key: ConfigKey, user_id: int) -> None:
        validation.require_manager(self.directory, key.company_id, user_id)

        def locked(tx: Session) -> None:
            if not config_store.delete_by_key(tx, key):
                logger.warning(f"DeleteByKey: no config for {key}")
                raise ConfigNotFound(
                    f"company={key.company_id} address={key.address_id} service={key.service_id}"
                )

        with db_errors("delete slots config"):
            run_serializable(db, locked)
        logger.info(f"DeleteByKey: config deleted for {key}")
