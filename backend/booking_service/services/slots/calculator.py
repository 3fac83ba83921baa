# backend/booking_service/services/slots/calculator.py
"""
Day slot grid.

Slots tile the working day from opening time in steps of the slot duration;
a slot is emitted only if it ends by closing time, so nothing straddles the
close. For today, slots starting before now + notice are dropped. Times are
company-local wall-clock minutes; there is no wrap past midnight.
"""

from datetime import date, datetime

from ...integrations.seller import Company, DaySchedule
from .config import minutes_to_time_str, time_str_to_minutes


def working_hours_for_day(company: Company, target_date: date) -> DaySchedule:
    return company.working_hours.for_date(target_date)


def generate_day_slots(
    day: DaySchedule,
    slot_duration_minutes: int,
    target_date: date,
    now: datetime,
    min_notice_minutes: int,
) -> list[str]:
    """
    Candidate start times ("HH:MM", ascending) for `target_date`.

    Returns an empty list for past dates and closed days.
    """
    if slot_duration_minutes <= 0:
        raise ValueError(f"slot duration must be positive, got {slot_duration_minutes}")

    today = now.date()
    if target_date < today:
        return []

    if not day.is_working_day:
        return []

    open_min = time_str_to_minutes(day.open_time)
    close_min = time_str_to_minutes(day.close_time)

    starts: list[int] = []
    t = open_min
    while t + slot_duration_minutes <= close_min:
        starts.append(t)
        t += slot_duration_minutes

    if target_date == today:
        # Seconds are ignored: 10:00:59 counts as 10:00
        min_allowed = now.hour * 60 + now.minute + min_notice_minutes
        starts = [s for s in starts if s >= min_allowed]

    return [minutes_to_time_str(s) for s in starts]
