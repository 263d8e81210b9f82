"""
Clock -- Injectable source of the current date.

Report services receive a Clock instead of calling ``date.today()`` so
that "as of today" reports are reproducible in tests.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current timezone-aware time."""
        ...

    def today(self) -> date:
        """Get the current calendar date (UTC)."""
        return self.now().astimezone(timezone.utc).date()


class SystemClock(Clock):
    """Production clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    ``now()`` returns the same value on repeated calls until ``advance()``
    or ``set_date()`` is called.
    """

    def __init__(self, fixed_date: date | None = None):
        start = fixed_date or date(2024, 1, 1)
        self._fixed_time = datetime(start.year, start.month, start.day, 12, tzinfo=timezone.utc)
        self._advance_days = 0

    def now(self) -> datetime:
        return self._fixed_time + timedelta(days=self._advance_days)

    def set_date(self, value: date) -> None:
        self._fixed_time = datetime(value.year, value.month, value.day, 12, tzinfo=timezone.utc)
        self._advance_days = 0

    def advance(self, days: int = 1) -> None:
        self._advance_days += days
