"""Tests for the day slot grid."""

from datetime import date, datetime, timedelta

import pytest

from booking_service.integrations.seller import DaySchedule
from booking_service.services.slots.calculator import generate_day_slots, working_hours_for_day
from booking_service.services.slots.config import minutes_to_time_str, time_str_to_minutes

from conftest import NOW, TODAY, TOMORROW, make_company, open_day, working_hours


class TestTimeHelpers:

    def test_round_trip(self):
        assert time_str_to_minutes("09:30") == 570
        assert minutes_to_time_str(570) == "09:30"
        assert minutes_to_time_str(0) == "00:00"

    @pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "ab:cd", "12:30:00", ""])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            time_str_to_minutes(value)


class TestGenerateDaySlots:

    def test_tiles_working_day(self):
        slots = generate_day_slots(open_day("09:00", "12:00"), 30, TOMORROW, NOW, 60)
        assert slots == ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]

    def test_no_slot_straddles_closing_time(self):
        slots = generate_day_slots(open_day("09:00", "10:00"), 45, TOMORROW, NOW, 0)
        assert slots == ["09:00"]

    def test_slot_ending_exactly_at_close_is_kept(self):
        slots = generate_day_slots(open_day("09:00", "11:00"), 60, TOMORROW, NOW, 0)
        assert slots == ["09:00", "10:00"]

    def test_closed_day(self):
        assert generate_day_slots(DaySchedule(is_open=False), 30, TOMORROW, NOW, 0) == []

    def test_open_day_without_times_is_closed(self):
        day = DaySchedule(is_open=True, open_time="09:00", close_time=None)
        assert generate_day_slots(day, 30, TOMORROW, NOW, 0) == []

    def test_past_date(self):
        yesterday = TODAY - timedelta(days=1)
        assert generate_day_slots(open_day(), 30, yesterday, NOW, 0) == []

    def test_today_drops_slots_inside_notice(self):
        now = datetime.combine(TODAY, datetime.min.time()).replace(hour=9, minute=10)
        slots = generate_day_slots(open_day("09:00", "12:00"), 30, TODAY, now, 60)
        # 09:10 + 60 min = 10:10
        assert slots == ["10:30", "11:00", "11:30"]

    def test_today_keeps_slot_exactly_at_notice_boundary(self):
        now = datetime(TODAY.year, TODAY.month, TODAY.day, 9, 0)
        slots = generate_day_slots(open_day("09:00", "12:00"), 30, TODAY, now, 60)
        assert slots[0] == "10:00"

    def test_seconds_are_ignored(self):
        now = datetime(TODAY.year, TODAY.month, TODAY.day, 9, 0, 59)
        slots = generate_day_slots(open_day("09:00", "12:00"), 30, TODAY, now, 60)
        assert slots[0] == "10:00"

    def test_notice_past_midnight_leaves_nothing(self):
        now = datetime(TODAY.year, TODAY.month, TODAY.day, 23, 0)
        assert generate_day_slots(open_day("09:00", "12:00"), 30, TODAY, now, 120) == []

    def test_future_date_ignores_notice(self):
        late = datetime(TODAY.year, TODAY.month, TODAY.day, 23, 59)
        slots = generate_day_slots(open_day("09:00", "10:00"), 30, TOMORROW, late, 600)
        assert slots == ["09:00", "09:30"]

    def test_non_positive_duration(self):
        with pytest.raises(ValueError):
            generate_day_slots(open_day(), 0, TOMORROW, NOW, 0)


class TestWorkingHoursForDay:

    def test_picks_weekday(self):
        company = make_company(hours=working_hours(sunday_closed=True))
        sunday = date(2026, 3, 8)
        monday = date(2026, 3, 9)
        assert not working_hours_for_day(company, sunday).is_working_day
        assert working_hours_for_day(company, monday).open_time == "09:00"
