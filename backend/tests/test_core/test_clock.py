"""Tests for the injectable clock and the operating calendar."""

from datetime import date, datetime, time, timedelta, timezone

from stayledger.core.clock import FixedClock, OperatingCalendar, elapsed

LAGOS = OperatingCalendar.from_names("Africa/Lagos", time(12, 0))


def test_fixed_clock_is_utc_and_advances() -> None:
    clock = FixedClock(datetime(2025, 1, 1, 9, 0))
    assert clock.now().tzinfo is timezone.utc
    clock.advance(timedelta(hours=2))
    assert clock.now() == datetime(2025, 1, 1, 11, 0, tzinfo=timezone.utc)


def test_today_uses_property_timezone() -> None:
    # 23:30 UTC on 31 December is already New Year's Day in Lagos (UTC+1).
    assert LAGOS.today(datetime(2024, 12, 31, 23, 30, tzinfo=timezone.utc)) == date(2025, 1, 1)


def test_check_instants() -> None:
    assert LAGOS.check_in_at(date(2025, 1, 10)) == datetime(2025, 1, 10, 11, 0, tzinfo=timezone.utc)
    assert LAGOS.check_out_at(date(2025, 1, 14)).hour == 12


def test_elapsed_tolerates_naive_utc() -> None:
    start = datetime(2025, 1, 10, 11, 0)
    end = datetime(2025, 1, 11, 12, 0, tzinfo=timezone.utc)
    assert elapsed(start, end) == timedelta(days=1, hours=1)
