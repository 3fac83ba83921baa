"""
Time provider injected into the availability and allocation flows.

All wall-clock values are company-local; no timezone conversion happens here.
"""

from datetime import datetime


class SystemClock:
    """Real clock for production."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock frozen at a given instant (tests, replays)."""

    def __init__(self, at: datetime):
        self.at = at

    def now(self) -> datetime:
        return self.at
