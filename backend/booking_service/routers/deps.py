# backend/booking_service/routers/deps.py
"""
FastAPI dependencies: collaborators, clock, caller identity.

Tests swap any of these through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends, Header

from ..clock import SystemClock
from ..config import settings
from ..integrations.cache import CachedSellerDirectory
from ..integrations.seller import SellerServiceClient
from ..integrations.users import UserServiceClient
from ..redis_client import redis_client
from ..services.allocator import BookingAllocator
from ..services.bookings import BookingQueries
from ..services.configs import ConfigManagement
from ..services.slots import AvailabilityCalculator


@lru_cache
def get_directory() -> CachedSellerDirectory:
    client = SellerServiceClient(settings.seller_service_url, settings.http_timeout_seconds)
    return CachedSellerDirectory(client, redis_client, settings.directory_cache_ttl_seconds)


@lru_cache
def get_users() -> UserServiceClient:
    return UserServiceClient(settings.user_service_url, settings.http_timeout_seconds)


def close_clients() -> None:
    """Release the HTTP connection pools of the clients created so far."""
    if get_directory.cache_info().currsize:
        get_directory().close()
        get_directory.cache_clear()
    if get_users.cache_info().currsize:
        get_users().close()
        get_users.cache_clear()


def get_clock():
    return SystemClock()


def current_user(x_user_id: int = Header(gt=0)) -> int:
    """Caller id from X-User-ID; authentication happens upstream."""
    return x_user_id


def get_availability(directory=Depends(get_directory), clock=Depends(get_clock)) -> AvailabilityCalculator:
    return AvailabilityCalculator(directory, clock)


def get_allocator(
    directory=Depends(get_directory),
    users=Depends(get_users),
    clock=Depends(get_clock),
) -> BookingAllocator:
    return BookingAllocator(directory, users, clock)


def get_booking_queries(directory=Depends(get_directory), clock=Depends(get_clock)) -> BookingQueries:
    return BookingQueries(directory, clock)


def get_config_management(directory=Depends(get_directory)) -> ConfigManagement:
    return ConfigManagement(directory)
