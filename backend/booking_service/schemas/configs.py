# backend/booking_service/schemas/configs.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class SlotsConfigCreate(BaseModel):
    company_id: int
    address_id: Optional[int] = None  # None = all addresses
    service_id: Optional[int] = None  # None = all services

    slot_duration_minutes: int
    max_concurrent_bookings: int
    advance_booking_days: int = 0  # 0 = unlimited
    min_booking_notice_minutes: int = 60


class SlotsConfigUpdate(BaseModel):
    slot_duration_minutes: Optional[int] = None
    max_concurrent_bookings: Optional[int] = None
    advance_booking_days: Optional[int] = None
    min_booking_notice_minutes: Optional[int] = None


class SlotsConfigRead(BaseModel):
    id: int
    company_id: int
    address_id: Optional[int] = None
    service_id: Optional[int] = None

    slot_duration_minutes: int
    max_concurrent_bookings: int
    advance_booking_days: int
    min_booking_notice_minutes: int

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EffectiveConfigRead(BaseModel):
    """Config chosen by the hierarchy, with the level it was found at."""
    id: int
    company_id: int
    address_id: Optional[int] = None
    service_id: Optional[int] = None
    level: str

    slot_duration_minutes: int
    max_concurrent_bookings: int
    advance_booking_days: int
    min_booking_notice_minutes: int

    has_advance_limit: bool
    supports_parallel_bookings: bool

    model_config = {"from_attributes": True}
