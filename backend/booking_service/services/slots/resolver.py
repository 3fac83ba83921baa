# backend/booking_service/services/slots/resolver.py
"""
Hierarchical capacity config lookup.

Probe order, first match wins:
    (company, address, service)
    (company, address, -)
    (company, -, service)
    (company, -, -)
"""

import logging

from sqlalchemy.orm import Session

from .. import config_store
from .config import CapacityConfig, ConfigKey, default_capacity_config

logger = logging.getLogger(__name__)


def resolve_config(db: Session, key: ConfigKey) -> CapacityConfig | None:
    """
    Most specific stored config for `key`, or None when no level matches.

    Data-access failures surface as InternalError.
    """
    for candidate in key.candidates():
        row = config_store.get_by_key(db, candidate)
        if row is not None:
            return CapacityConfig.from_row(row)
    return None


def resolve_effective_config(db: Session, key: ConfigKey) -> CapacityConfig:
    """Like resolve_config, but falls back to the built-in defaults."""
    config = resolve_config(db, key)
    if config is None:
        logger.info(
            f"Using default slots config for company={key.company_id}, "
            f"address={key.address_id}, service={key.service_id}"
        )
        return default_capacity_config(key.company_id)

    logger.info(f"Using slots config id={config.id} ({config.level.value})")
    return config
