"""Calendar clock for the rollover engine.

All "today" decisions go through a Clock so tests can pin the date.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Source of the current instant in a single, process-wide timezone."""

    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Wall clock in a fixed timezone (UTC unless configured)."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self.tz = tz or timezone.utc

    @classmethod
    def from_name(cls, name: str) -> SystemClock:
        if name.upper() == "UTC":
            return cls(timezone.utc)
        return cls(ZoneInfo(name))

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


def days_between(a: date, b: date) -> int:
    """Whole-day absolute difference between two calendar dates."""
    return abs((b - a).days)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string. Raises ValueError on anything else."""
    return date.fromisoformat(value)


def date_of(timestamp: str) -> date:
    """Calendar date of an ISO-8601 timestamp, as written in the timestamp."""
    # Date part only; also accepts a trailing "Z" offset on Python 3.10.
    return date.fromisoformat(timestamp.split("T", 1)[0])


def format_timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds")
