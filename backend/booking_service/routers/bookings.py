# backend/booking_service/routers/bookings.py

from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.bookings import (
    BookingCancel,
    BookingCreate,
    BookingRead,
    BookingStatusUpdate,
)
from ..services.allocator import AllocationRequest, BookingAllocator
from ..services.bookings import BookingQueries, CompanyBookingsQuery
from .deps import current_user, get_allocator, get_booking_queries

router = APIRouter(tags=["bookings"])


@router.post("/bookings", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    user_id: int = Depends(current_user),
    allocator: BookingAllocator = Depends(get_allocator),
    db: Session = Depends(get_db),
):
    request = AllocationRequest(
        user_id=user_id,
        company_id=data.company_id,
        address_id=data.address_id,
        service_id=data.service_id,
        booking_date=data.date,
        start_time=data.start_time,
        notes=data.notes,
    )
    return allocator.allocate(db, request)


@router.get("/bookings/my", response_model=list[BookingRead])
def list_my_bookings(
    status: str | None = None,
    user_id: int = Depends(current_user),
    queries: BookingQueries = Depends(get_booking_queries),
    db: Session = Depends(get_db),
):
    return queries.get_user_bookings(db, user_id, status)


@router.get("/bookings/{id}", response_model=BookingRead)
def get_booking(
    id: int,
    user_id: int = Depends(current_user),
    queries: BookingQueries = Depends(get_booking_queries),
    db: Session = Depends(get_db),
):
    return queries.get_by_id(db, id, user_id)


@router.post("/bookings/{id}/cancel", response_model=BookingRead)
def cancel_booking(
    id: int,
    data: BookingCancel,
    user_id: int = Depends(current_user),
    queries: BookingQueries = Depends(get_booking_queries),
    db: Session = Depends(get_db),
):
    return queries.cancel(db, id, user_id, data.cancellation_reason)


@router.patch("/bookings/{id}/status", response_model=BookingRead)
def update_booking_status(
    id: int,
    data: BookingStatusUpdate,
    user_id: int = Depends(current_user),
    queries: BookingQueries = Depends(get_booking_queries),
    db: Session = Depends(get_db),
):
    return queries.update_status(db, id, user_id, data.status)


@router.get("/companies/{company_id}/bookings", response_model=list[BookingRead])
def list_company_bookings(
    company_id: int,
    address_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    status: str | None = None,
    include_inactive: bool = Query(False),
    user_id: int = Depends(current_user),
    queries: BookingQueries = Depends(get_booking_queries),
    db: Session = Depends(get_db),
):
    query = CompanyBookingsQuery(
        company_id=company_id,
        address_id=address_id,
        start_date=start_date,
        end_date=end_date,
        status=status,
        include_inactive=include_inactive,
    )
    return queries.get_company_bookings(db, user_id, query)
