from sqlalchemy import Column, Date, DateTime, Float, Index, Integer, String, Text, UniqueConstraint, func, text

from sqlalchemy.orm import declarative_base

from .status import CANCELLABLE_STATUSES, CANCELLED_STATUSES, BookingStatus, is_active_status

Base = declarative_base()
metadata = Base.metadata


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        Index('ix_bookings_company_address_date', 'company_id', 'address_id', 'booking_date'),
        Index('ix_bookings_user_id', 'user_id'),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False)
    company_id = Column(Integer, nullable=False)
    address_id = Column(Integer, nullable=False)
    service_id = Column(Integer, nullable=False)
    vehicle_id = Column(Integer, nullable=False)
    booking_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # "HH:MM", company-local
    duration_minutes = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))

    # Snapshot of directory data at creation time
    service_name = Column(Text, nullable=False)
    service_price = Column(Float, nullable=False, server_default=text('0'))
    vehicle_brand = Column(Text)
    vehicle_model = Column(Text)
    vehicle_license_plate = Column(Text)

    notes = Column(Text)
    cancellation_reason = Column(Text)
    cancelled_at = Column(DateTime)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    @property
    def is_active(self) -> bool:
        return is_active_status(self.status)

    @property
    def can_be_cancelled(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    @property
    def is_cancelled(self) -> bool:
        return self.status in CANCELLED_STATUSES

    @property
    def is_completed(self) -> bool:
        return self.status in (BookingStatus.COMPLETED.value, BookingStatus.NO_SHOW.value)


class CompanySlotsConfig(Base):
    __tablename__ = 'company_slots_config'
    __table_args__ = (
        UniqueConstraint('company_id', 'address_id', 'service_id'),
    )

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, nullable=False, index=True)
    address_id = Column(Integer)  # NULL = all addresses
    service_id = Column(Integer)  # NULL = all services
    slot_duration_minutes = Column(Integer, nullable=False)
    max_concurrent_bookings = Column(Integer, nullable=False)
    advance_booking_days = Column(Integer, nullable=False, server_default=text('0'))  # 0 = unlimited
    min_booking_notice_minutes = Column(Integer, nullable=False, server_default=text('0'))

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
