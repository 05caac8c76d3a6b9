"""Clock abstraction for testable time operations"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Abstract clock for time operations"""

    @abstractmethod
    def now(self) -> datetime:
        """Get current time as timezone-aware UTC datetime"""
        pass

    def epoch_millis(self) -> int:
        """Current time as milliseconds since the Unix epoch"""
        return int(self.now().timestamp() * 1000)

    def isoformat(self) -> str:
        """Current time as an ISO-8601 string with millisecond precision"""
        return self.now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SystemClock(Clock):
    """Production clock using system time"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Test clock with fixed or controllable time"""

    def __init__(self, fixed_time: datetime):
        """
        Initialize with fixed time

        Args:
            fixed_time: The fixed datetime to return. Naive values are taken as UTC.
        """
        self._current_time = _as_utc(fixed_time)

    def now(self) -> datetime:
        return self._current_time

    def advance(self, delta: timedelta) -> None:
        """Advance the clock by given timedelta"""
        self._current_time += delta

    def set(self, new_time: datetime) -> None:
        """Set clock to specific time"""
        self._current_time = _as_utc(new_time)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
