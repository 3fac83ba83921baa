# backend/booking_service/services/slots/__init__.py
"""
Slots calculation module.

config:       capacity config, hierarchy keys, defaults, time helpers
resolver:     4-level config lookup
calculator:   day slot grid from working hours
overlap:      half-open window overlap counting
availability: read path composing the three above
"""

from .config import (
    CapacityConfig,
    ConfigKey,
    ConfigLevel,
    default_capacity_config,
    minutes_to_time_str,
    time_str_to_minutes,
)
from .resolver import resolve_config, resolve_effective_config
from .calculator import generate_day_slots, working_hours_for_day
from .overlap import TimeWindow, count_overlaps
from .availability import AvailabilityCalculator, AvailableSlot, DayAvailability

__all__ = [
    "CapacityConfig",
    "ConfigKey",
    "ConfigLevel",
    "default_capacity_config",
    "minutes_to_time_str",
    "time_str_to_minutes",
    "resolve_config",
    "resolve_effective_config",
    "generate_day_slots",
    "working_hours_for_day",
    "TimeWindow",
    "count_overlaps",
    "AvailabilityCalculator",
    "AvailableSlot",
    "DayAvailability",
]
