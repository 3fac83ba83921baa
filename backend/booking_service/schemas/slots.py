# backend/booking_service/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date
from pydantic import BaseModel


class AvailableSlotRead(BaseModel):
    """One candidate slot with remaining capacity."""
    start_time: str  # "HH:MM"
    duration_minutes: int
    available_spots: int
    total_spots: int

    model_config = {"from_attributes": True}


class AvailableSlotsResponse(BaseModel):
    company_id: int
    address_id: int
    service_id: int
    date: date
    slots: list[AvailableSlotRead]

    model_config = {"from_attributes": True}
