# backend/booking_service/schemas/bookings.py

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class BookingCreate(BaseModel):
    company_id: int
    address_id: int
    service_id: int

    date: date
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")  # "HH:MM"

    notes: Optional[str] = None


class BookingRead(BaseModel):
    id: int

    user_id: int
    company_id: int
    address_id: int
    service_id: int
    vehicle_id: int

    booking_date: date
    start_time: str
    duration_minutes: int

    status: str

    service_name: str
    service_price: float
    vehicle_brand: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_license_plate: Optional[str] = None

    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingCancel(BaseModel):
    cancellation_reason: Optional[str] = Field(default=None, max_length=500)


class BookingStatusUpdate(BaseModel):
    status: str
