"""Error taxonomy for the booking engine.

Three families, each mapped to one HTTP status by ``stayledger.main``
(``NotFoundError`` sits beside them as a plain 404):

* ``InputError``: bad caller input; fix the input and try again.
* ``StateConflictError``: the ledger or calendar is in a state that forbids
  the operation right now; recoverable once the underlying state changes.
* ``InvariantViolation``: a programming error (e.g. checking out a booking
  that was never checked in). Never retried, always logged loudly.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stayledger.core.money import Money


class StayLedgerError(Exception):
    """Base class for every error raised by the engine."""

    code: str = "stayledger_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFoundError(StayLedgerError):
    """A unit or booking does not exist for the caller's tenant."""

    code = "not_found"


# ---------------------------------------------------------------------------
# Input errors
# ---------------------------------------------------------------------------


class InputError(StayLedgerError):
    code = "invalid_input"


class MoneyParseError(InputError):
    code = "money_parse_error"

    def __init__(self, raw: object) -> None:
        super().__init__(f"Cannot parse {raw!r} as a money amount")
        self.raw = raw


class InvalidRangeError(InputError):
    code = "invalid_range"


class PastDateError(InputError):
    code = "past_date"


class ZeroNightsError(InputError):
    code = "zero_nights"


class InvalidAmountError(InputError):
    code = "invalid_amount"


class MissingReferenceError(InputError):
    code = "missing_reference"


class MissingReasonError(InputError):
    code = "missing_reason"


class InvalidPromotionError(InputError):
    code = "invalid_promotion"


class NotOverstayedError(InputError):
    code = "not_overstayed"


# ---------------------------------------------------------------------------
# State conflicts
# ---------------------------------------------------------------------------


class StateConflictError(StayLedgerError):
    code = "state_conflict"


class OutstandingBalanceError(StateConflictError):
    """Checkout refused: the guest still owes money or certification is missing.

    Carries the current outstanding amount so callers can display it without
    querying the ledger again.
    """

    code = "outstanding_balance"

    def __init__(self, outstanding: Money, message: str | None = None) -> None:
        super().__init__(message or f"Outstanding balance of {outstanding} must be settled before checkout")
        self.outstanding = outstanding

    def to_dict(self) -> dict:
        return {**super().to_dict(), "outstanding": str(self.outstanding)}


class BookingConflictError(StateConflictError):
    code = "booking_conflict"

    def __init__(self, conflicting_ids: Iterable[uuid.UUID]) -> None:
        self.conflicting_ids = list(conflicting_ids)
        super().__init__("Selected dates conflict with an existing booking for this unit")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "conflicting_booking_ids": [str(i) for i in self.conflicting_ids]}


class PaymentNotAllowedError(StateConflictError):
    code = "payment_not_allowed"


# ---------------------------------------------------------------------------
# Invariant violations
# ---------------------------------------------------------------------------


class InvariantViolation(StayLedgerError):
    code = "invariant_violation"


class InvalidTransitionError(InvariantViolation):
    code = "invalid_transition"

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move booking from {current} to {target}")
        self.current = current
        self.target = target
