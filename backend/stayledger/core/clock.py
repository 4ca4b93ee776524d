"""Injectable clock and the property's operating calendar."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

ONE_DAY = timedelta(days=1)


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass
class FixedClock:
    """A clock frozen at ``current``; tests move it with ``advance``."""

    current: datetime

    def __post_init__(self) -> None:
        if self.current.tzinfo is None:
            self.current = self.current.replace(tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


@dataclass(frozen=True)
class OperatingCalendar:
    """Maps booking calendar dates to instants in the property's timezone.

    Bookings store plain dates; guests arrive and leave at ``check_time`` on
    those dates, local to the property.
    """

    tz: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    check_time: time = time(12, 0)

    @classmethod
    def from_names(cls, tz_name: str, check_time: time) -> OperatingCalendar:
        return cls(tz=ZoneInfo(tz_name), check_time=check_time)

    def today(self, now: datetime) -> date:
        return _aware(now).astimezone(self.tz).date()

    def instant(self, day: date) -> datetime:
        return datetime.combine(day, self.check_time, tzinfo=self.tz)

    def check_in_at(self, check_in: date) -> datetime:
        return self.instant(check_in)

    def check_out_at(self, check_out: date) -> datetime:
        return self.instant(check_out)


def _aware(moment: datetime) -> datetime:
    # Naive datetimes coming back from the database are UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def elapsed(start: datetime, end: datetime) -> timedelta:
    """``end - start`` tolerating naive UTC timestamps on either side."""
    return _aware(end) - _aware(start)
