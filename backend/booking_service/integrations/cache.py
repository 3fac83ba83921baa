"""
backend/booking_service/integrations/cache.py

Redis snapshot cache in front of the seller directory.

Keys:
    directory:company:{company_id}
    directory:service:{company_id}:{service_id}

Values are the pydantic models dumped to JSON, expiring after `ttl` seconds.
Not-found answers are never cached. If Redis is down, every call goes
straight to the wrapped client.
"""

import logging

from pydantic import ValidationError
from redis import Redis, RedisError

from .seller import Company, SellerServiceClient, Service

logger = logging.getLogger(__name__)


class CachedSellerDirectory:
    """Same interface as SellerServiceClient, served from Redis when possible."""

    KEY_PREFIX = "directory"

    def __init__(self, inner: SellerServiceClient, redis: Redis, ttl: int = 60):
        self.inner = inner
        self.redis = redis
        self.ttl = ttl

    def _company_key(self, company_id: int) -> str:
        return f"{self.KEY_PREFIX}:company:{company_id}"

    def _service_key(self, company_id: int, service_id: int) -> str:
        return f"{self.KEY_PREFIX}:service:{company_id}:{service_id}"

    # ── Read ─────────────────────────────────────────────────────────────

    def get_company(self, company_id: int) -> Company:
        key = self._company_key(company_id)
        cached = self._load(key, Company)
        if cached is not None:
            return cached
        company = self.inner.get_company(company_id)
        self._store(key, company)
        return company

    def get_service(self, company_id: int, service_id: int) -> Service:
        key = self._service_key(company_id, service_id)
        cached = self._load(key, Service)
        if cached is not None:
            return cached
        service = self.inner.get_service(company_id, service_id)
        self._store(key, service)
        return service

    def close(self) -> None:
        self.inner.close()

    # ── Helpers ──────────────────────────────────────────────────────────

    def _load(self, key: str, model):
        if self.ttl <= 0:
            return None
        try:
            raw = self.redis.get(key)
        except RedisError as e:
            logger.warning(f"Directory cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError:
            logger.warning(f"Dropping malformed directory cache entry {key}")
            return None

    def _store(self, key: str, value) -> None:
        if self.ttl <= 0:
            return
        try:
            self.redis.set(key, value.model_dump_json(), ex=self.ttl)
        except RedisError as e:
            logger.warning(f"Directory cache write failed for {key}: {e}")
