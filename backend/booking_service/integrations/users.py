"""
backend/booking_service/integrations/users.py

User profile registry: which vehicle the user has selected.

GET /internal/users/{user_id}/cars/selected
"""

import logging

from pydantic import BaseModel

from .http import InternalApiClient

logger = logging.getLogger(__name__)


class ResourceNotSelectedError(Exception):
    """User has no selected vehicle."""


class Vehicle(BaseModel):
    id: int
    user_id: int | None = None
    brand: str | None = None
    model: str | None = None
    license_plate: str | None = None
    color: str | None = None
    size: str | None = None


class UserServiceClient(InternalApiClient):
    """HTTP client for the user service."""

    def get_selected_vehicle(self, user_id: int) -> Vehicle:
        resp = self._get(f"/internal/users/{user_id}/cars/selected")
        if resp.status_code == 404:
            logger.info(f"No selected vehicle for user_id={user_id}")
            raise ResourceNotSelectedError(f"user {user_id}")
        vehicle = self._parse(Vehicle, resp)
        logger.info(f"Fetched selected vehicle id={vehicle.id} for user_id={user_id}")
        return vehicle
