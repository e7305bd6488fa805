"""Clock abstraction for an injectable source of "now"."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from typing_extensions import override


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware datetime."""
        pass


class SystemClock(Clock):
    """Default implementation: system UTC clock."""

    @override
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock frozen at a single instant, for reproducible results."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            raise TypeError(
                f"FixedClock requires a timezone-aware datetime.\n"
                f"Got naive datetime: {instant!r}\n"
                f"Hint: datetime(..., tzinfo=timezone.utc)"
            )
        self.instant: datetime = instant

    @override
    def now(self) -> datetime:
        return self.instant

    @override
    def __repr__(self) -> str:
        return f"FixedClock({self.instant.isoformat()})"
