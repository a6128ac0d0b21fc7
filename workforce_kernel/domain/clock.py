"""
Injectable wall clock.

Check-in, check-out, auto checkout and payroll dates all read time through
a ``Clock`` passed to the service, so a shift can be replayed in a test at
any hour of any day.  ``now()`` is the site-local wall clock and is naive:
schedules are stored as local times of day and are compared in that frame.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta

# Monday 2024-01-15, the start of a regular 08:00 shift
DEFAULT_TEST_TIME = datetime(2024, 1, 15, 8, 0)


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Current local wall-clock time, naive."""

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Host clock, truncated to whole seconds."""

    def now(self) -> datetime:
        return datetime.now().replace(microsecond=0)


class DeterministicClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or DEFAULT_TEST_TIME

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        self._current = time

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)
