"""Forward-only booking status machine."""

from __future__ import annotations

from stayledger.core.enums import BookingStatus
from stayledger.core.errors import InvalidTransitionError

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CHECKED_IN, BookingStatus.CANCELLED}),
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.CHECKED_OUT}),
    BookingStatus.CHECKED_OUT: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: BookingStatus, target: BookingStatus) -> BookingStatus:
    """Return ``target`` if the move is legal, else raise ``InvalidTransitionError``."""
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)
    return target
