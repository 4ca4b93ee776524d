"""Availability checks: may this unit be booked for these nights?

Stays are half-open ``[check_in, check_out)``: a guest leaving on day X and
another arriving on day X never conflict.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import date, timedelta

from stayledger.core.enums import BLOCKING_STATUSES
from stayledger.core.errors import BookingConflictError, InvalidRangeError, PastDateError
from stayledger.core.records import BookingSnapshot, DateRange


def ranges_overlap(a: DateRange, b: DateRange) -> bool:
    return a.check_in < b.check_out and a.check_out > b.check_in


def validate_range(candidate: DateRange, today: date | None = None) -> None:
    """Reject zero/negative-night stays and, when ``today`` is given, past arrivals."""
    if candidate.check_out <= candidate.check_in:
        raise InvalidRangeError("check_out must be after check_in")
    if today is not None and candidate.check_in < today:
        raise PastDateError(f"check_in {candidate.check_in.isoformat()} is before today ({today.isoformat()})")


def blocking_bookings(unit_id: uuid.UUID, existing: Iterable[BookingSnapshot]) -> list[BookingSnapshot]:
    return [b for b in existing if b.unit_id == unit_id and b.status in BLOCKING_STATUSES]


def find_conflicts(
    unit_id: uuid.UUID,
    candidate: DateRange,
    existing: Iterable[BookingSnapshot],
    exclude_booking_id: uuid.UUID | None = None,
) -> list[BookingSnapshot]:
    return [
        b
        for b in blocking_bookings(unit_id, existing)
        if b.id != exclude_booking_id and ranges_overlap(b.stay, candidate)
    ]


def is_bookable(
    unit_id: uuid.UUID,
    candidate: DateRange,
    existing: Iterable[BookingSnapshot],
    today: date | None = None,
) -> bool:
    """Whether ``candidate`` is free on ``unit_id``.

    Raises ``InvalidRangeError`` for a stay without nights and
    ``PastDateError`` for an arrival before ``today``; returns ``False`` when
    a blocking booking overlaps.
    """
    validate_range(candidate, today)
    return not find_conflicts(unit_id, candidate, existing)


def ensure_bookable(
    unit_id: uuid.UUID,
    candidate: DateRange,
    existing: Iterable[BookingSnapshot],
    today: date | None = None,
) -> None:
    """Like ``is_bookable`` but raises ``BookingConflictError`` on overlap."""
    validate_range(candidate, today)
    conflicts = find_conflicts(unit_id, candidate, existing)
    if conflicts:
        raise BookingConflictError(b.id for b in conflicts)


def is_date_blocked(unit_id: uuid.UUID, day: date, existing: Iterable[BookingSnapshot]) -> bool:
    single_night = DateRange(day, day + timedelta(days=1))
    return bool(find_conflicts(unit_id, single_night, existing))


def blocked_dates(unit_id: uuid.UUID, window: DateRange, existing: Iterable[BookingSnapshot]) -> list[date]:
    """Every blocked night inside ``window``, for calendar rendering."""
    blocking = blocking_bookings(unit_id, existing)
    return [day for day in window.days() if is_date_blocked(unit_id, day, blocking)]
