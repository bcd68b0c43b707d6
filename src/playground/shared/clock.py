"""Injectable clock.

Every timestamp the lifecycle records (creation, status history, start and
completion stamps, order numbers) is read through ``utcnow()`` so tests can
pin time with a ``FixedClock``.
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock(Clock):
    """Clock frozen at a given instant until moved explicitly."""

    def __init__(self, instant: datetime):
        self.instant = instant if instant.tzinfo else instant.replace(tzinfo=UTC)

    def now(self) -> datetime:
        return self.instant

    def advance(self, **delta) -> datetime:
        self.instant = self.instant + timedelta(**delta)
        return self.instant


_clock_instance = None


def get_clock() -> Clock:
    """Return the active clock (singleton, system clock by default)."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


def set_clock(clock: Clock) -> None:
    global _clock_instance
    _clock_instance = clock


def reset_clock():
    """Reset the clock singleton (useful for testing)."""
    global _clock_instance
    _clock_instance = None


def utcnow() -> datetime:
    return get_clock().now()
