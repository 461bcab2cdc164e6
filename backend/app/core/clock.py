"""
Time source for the services.

Everything that stamps a document asks a Clock for the current time, so tests
can pin it and step it forward.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Clock:
    """Wall clock returning timezone-aware UTC datetimes."""

    def now(self) -> datetime:
        return utc_now()


def duration_ms(start: datetime, end: datetime) -> int:
    """Milliseconds elapsed between two datetimes, never negative."""
    return max(0, int((end - start).total_seconds() * 1000))
