"""
Clock abstraction

Every time-based rule (invite expiry, trial countdown, dismissal window,
webhook tolerance) reads the time through a Clock so tests can control it.
All timestamps are naive UTC, matching what the database returns.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from tenant_lifecycle.domain.base import utc_now


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current time as naive UTC"""
        pass


class SystemClock(Clock):
    def now(self) -> datetime:
        return utc_now()
