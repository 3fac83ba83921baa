# backend/booking_service/routers/slots.py
"""
Slots API endpoints.

GET /companies/{company_id}/addresses/{address_id}/available-slots
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.slots import AvailableSlotsResponse
from ..services.slots import AvailabilityCalculator
from .deps import get_availability


router = APIRouter(tags=["slots"])


@router.get(
    "/companies/{company_id}/addresses/{address_id}/available-slots",
    response_model=AvailableSlotsResponse,
)
def get_available_slots(
    company_id: int,
    address_id: int,
    service_id: int = Query(...),
    date: date = Query(...),
    calculator: AvailabilityCalculator = Depends(get_availability),
    db: Session = Depends(get_db),
):
    """Slots of one day with remaining spots. A closed day returns an empty list."""
    return calculator.execute(db, company_id, address_id, service_id, date)
