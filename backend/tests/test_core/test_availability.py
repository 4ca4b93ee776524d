"""Tests for half-open stay overlap and unit availability."""

import uuid
from datetime import date

import pytest

from stayledger.core.availability import (
    blocked_dates,
    ensure_bookable,
    find_conflicts,
    is_bookable,
    is_date_blocked,
    ranges_overlap,
)
from stayledger.core.enums import BookingStatus
from stayledger.core.errors import BookingConflictError, InvalidRangeError, PastDateError
from stayledger.core.money import Money
from stayledger.core.records import BookingSnapshot, DateRange

UNIT = uuid.uuid4()
OTHER_UNIT = uuid.uuid4()


def _stay(a: str, b: str) -> DateRange:
    return DateRange(date.fromisoformat(a), date.fromisoformat(b))


def _booking(a: str, b: str, status: BookingStatus = BookingStatus.CONFIRMED, unit=UNIT) -> BookingSnapshot:
    return BookingSnapshot(
        id=uuid.uuid4(),
        unit_id=unit,
        check_in=date.fromisoformat(a),
        check_out=date.fromisoformat(b),
        status=status,
        total_amount=Money.major(100_000),
    )


class TestRangesOverlap:
    def test_back_to_back_stays_do_not_overlap(self) -> None:
        first = _stay("2025-01-10", "2025-01-13")
        second = _stay("2025-01-13", "2025-01-15")
        assert not ranges_overlap(first, second)
        assert not ranges_overlap(second, first)

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            (("2025-01-10", "2025-01-13"), ("2025-01-12", "2025-01-14")),
            (("2025-01-10", "2025-01-20"), ("2025-01-12", "2025-01-14")),
            (("2025-01-10", "2025-01-11"), ("2025-01-10", "2025-01-11")),
        ],
    )
    def test_overlap_is_symmetric(self, a, b) -> None:
        assert ranges_overlap(_stay(*a), _stay(*b))
        assert ranges_overlap(_stay(*b), _stay(*a))


class TestIsBookable:
    def test_free_unit(self) -> None:
        assert is_bookable(UNIT, _stay("2025-01-10", "2025-01-13"), [])

    def test_blocking_statuses_hold_nights(self) -> None:
        for status in (BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN):
            existing = [_booking("2025-01-10", "2025-01-13", status)]
            assert not is_bookable(UNIT, _stay("2025-01-12", "2025-01-14"), existing)

    def test_cancelled_and_checked_out_free_nights(self) -> None:
        existing = [
            _booking("2025-01-10", "2025-01-13", BookingStatus.CANCELLED),
            _booking("2025-01-10", "2025-01-13", BookingStatus.CHECKED_OUT),
        ]
        assert is_bookable(UNIT, _stay("2025-01-10", "2025-01-13"), existing)

    def test_other_units_are_ignored(self) -> None:
        existing = [_booking("2025-01-10", "2025-01-13", unit=OTHER_UNIT)]
        assert is_bookable(UNIT, _stay("2025-01-10", "2025-01-13"), existing)

    def test_arrival_on_a_departure_day(self) -> None:
        existing = [_booking("2025-01-10", "2025-01-13")]
        assert is_bookable(UNIT, _stay("2025-01-13", "2025-01-15"), existing)

    def test_zero_nights_is_invalid(self) -> None:
        with pytest.raises(InvalidRangeError):
            is_bookable(UNIT, _stay("2025-01-10", "2025-01-10"), [])

    def test_inverted_range_is_invalid(self) -> None:
        with pytest.raises(InvalidRangeError):
            is_bookable(UNIT, _stay("2025-01-12", "2025-01-10"), [])

    def test_past_arrival(self) -> None:
        with pytest.raises(PastDateError):
            is_bookable(UNIT, _stay("2025-01-09", "2025-01-11"), [], today=date(2025, 1, 10))

    def test_arrival_today_is_allowed(self) -> None:
        assert is_bookable(UNIT, _stay("2025-01-10", "2025-01-11"), [], today=date(2025, 1, 10))


class TestEnsureBookable:
    def test_conflict_lists_the_blocking_bookings(self) -> None:
        held = _booking("2025-01-10", "2025-01-13")
        with pytest.raises(BookingConflictError) as excinfo:
            ensure_bookable(UNIT, _stay("2025-01-12", "2025-01-14"), [held])
        assert excinfo.value.conflicting_ids == [held.id]
        assert excinfo.value.to_dict()["conflicting_booking_ids"] == [str(held.id)]

    def test_find_conflicts_can_exclude_a_booking(self) -> None:
        held = _booking("2025-01-10", "2025-01-13")
        assert find_conflicts(UNIT, held.stay, [held], exclude_booking_id=held.id) == []


class TestCalendar:
    def test_is_date_blocked(self) -> None:
        existing = [_booking("2025-01-10", "2025-01-13")]
        assert is_date_blocked(UNIT, date(2025, 1, 10), existing)
        assert is_date_blocked(UNIT, date(2025, 1, 12), existing)
        # The departure day is not a night of the stay.
        assert not is_date_blocked(UNIT, date(2025, 1, 13), existing)

    def test_blocked_dates_in_window(self) -> None:
        existing = [
            _booking("2025-01-02", "2025-01-04"),
            _booking("2025-01-06", "2025-01-07", BookingStatus.CANCELLED),
        ]
        window = _stay("2025-01-01", "2025-01-08")
        assert blocked_dates(UNIT, window, existing) == [date(2025, 1, 2), date(2025, 1, 3)]
