# backend/booking_service/services/config_store.py
"""
Persistence for company_slots_config rows.

Functions flush but never commit; the caller owns the transaction.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import db_errors
from ..errors import ConfigAlreadyExists
from ..models.generated import CompanySlotsConfig
from .slots.config import ConfigKey


def _optional_eq(column, value):
    # NULL never equals NULL in SQL
    return column.is_(None) if value is None else column == value


def get_by_key(db: Session, key: ConfigKey) -> CompanySlotsConfig | None:
    with db_errors("get slots config by key"):
        return (
            db.query(CompanySlotsConfig)
            .filter(
                CompanySlotsConfig.company_id == key.company_id,
                _optional_eq(CompanySlotsConfig.address_id, key.address_id),
                _optional_eq(CompanySlotsConfig.service_id, key.service_id),
            )
            .first()
        )


def get_by_id(db: Session, config_id: int) -> CompanySlotsConfig | None:
    with db_errors("get slots config by id"):
        return db.get(CompanySlotsConfig, config_id)


def get_all_by_company(db: Session, company_id: int) -> list[CompanySlotsConfig]:
    """All configs of a company, least specific (global) first."""
    with db_errors("list slots configs"):
        return (
            db.query(CompanySlotsConfig)
            .filter(CompanySlotsConfig.company_id == company_id)
            .order_by(
                CompanySlotsConfig.address_id.asc().nulls_first(),
                CompanySlotsConfig.service_id.asc().nulls_first(),
            )
            .all()
        )


def create(
    db: Session,
    key: ConfigKey,
    slot_duration_minutes: int,
    max_concurrent_bookings: int,
    advance_booking_days: int,
    min_booking_notice_minutes: int,
) -> CompanySlotsConfig:
    obj = CompanySlotsConfig(
        company_id=key.company_id,
        address_id=key.address_id,
        service_id=key.service_id,
        slot_duration_minutes=slot_duration_minutes,
        max_concurrent_bookings=max_concurrent_bookings,
        advance_booking_days=advance_booking_days,
        min_booking_notice_minutes=min_booking_notice_minutes,
    )
    with db_errors("create slots config"):
        try:
            db.add(obj)
            db.flush()
        except IntegrityError as e:
            raise ConfigAlreadyExists(
                f"company={key.company_id} address={key.address_id} service={key.service_id}"
            ) from e
        db.refresh(obj)
    return obj


def update(db: Session, obj: CompanySlotsConfig, **fields) -> CompanySlotsConfig:
    with db_errors("update slots config"):
        for name, value in fields.items():
            setattr(obj, name, value)
        db.flush()
        db.refresh(obj)
    return obj


def delete(db: Session, obj: CompanySlotsConfig) -> None:
    with db_errors("delete slots config"):
        db.delete(obj)
        db.flush()


def delete_by_key(db: Session, key: ConfigKey) -> bool:
    """Delete the row stored under exactly `key`; False when there is none."""
    obj = get_by_key(db, key)
    if obj is None:
        return False
    delete(db, obj)
    return True
