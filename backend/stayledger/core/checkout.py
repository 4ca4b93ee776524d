"""Checkout reconciliation.

Checkout is a two-phase affair for front-desk staff:

1. While the guest is in house, damage and overstay charges may be posted on
   their own. Posting a charge is a complete action even though it usually
   blocks checkout until the guest pays it.
2. ``complete_checkout`` stages any charges entered on the checkout form on a
   copy of the ledger, gates on the staged outstanding balance plus the two
   certifications, works out the early-checkout refund and returns a
   ``CheckoutSettlement``. The caller persists the settlement as one unit;
   a rejected checkout returns nothing to persist.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from fractions import Fraction

from stayledger.core.clock import ONE_DAY, OperatingCalendar, elapsed
from stayledger.core.enums import BookingStatus, ChargeKind, RefundPolicy
from stayledger.core.errors import (
    InvalidAmountError,
    InvariantViolation,
    MissingReasonError,
    NotOverstayedError,
    OutstandingBalanceError,
)
from stayledger.core.ledger import LedgerSummary, PaymentLedger
from stayledger.core.lifecycle import ensure_transition
from stayledger.core.money import Money
from stayledger.core.records import BookingSnapshot, Charge

_NO_TIME = timedelta(0)

# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CheckoutCertification:
    """What the receptionist attests to, next to what the ledger says.

    Evidence only: building or checking a certification never touches the
    ledger.
    """

    outstanding_amount: Money
    damages_cost: Money
    certify_no_outstanding: bool
    certify_no_damages: bool

    @classmethod
    def from_ledger(
        cls,
        ledger: PaymentLedger,
        certify_no_outstanding: bool,
        certify_no_damages: bool,
    ) -> CheckoutCertification:
        return cls(
            outstanding_amount=ledger.outstanding(),
            damages_cost=ledger.unsettled_damages(),
            certify_no_outstanding=certify_no_outstanding,
            certify_no_damages=certify_no_damages,
        )

    def is_satisfied(self) -> bool:
        return (
            self.certify_no_outstanding
            and self.certify_no_damages
            and self.outstanding_amount.is_zero()
            and self.damages_cost.is_zero()
        )


@dataclass(frozen=True)
class RefundRequest:
    policy: RefundPolicy = RefundPolicy.NO_REFUND
    penalty: Money = field(default_factory=Money.zero)
    approved: bool = False
    refund_amount: Money | None = None
    reason: str | None = None


@dataclass(frozen=True)
class RefundDecision:
    policy: RefundPolicy
    booked_nights: int
    used_nights: int
    unused_nights: int
    nightly_rate: Money
    eligible_amount: Money
    penalty: Money
    suggested_amount: Money
    approved: bool
    refund_amount: Money
    reason: str | None = None

    @property
    def overridden(self) -> bool:
        return self.approved and self.refund_amount != self.suggested_amount


@dataclass(frozen=True)
class CheckoutRequest:
    certify_no_outstanding: bool = False
    certify_no_damages: bool = False
    damages_cost: Money = field(default_factory=Money.zero)
    damages_notes: str | None = None
    overstay_charge: Money = field(default_factory=Money.zero)
    overstay_notes: str | None = None
    refund: RefundRequest | None = None
    notes: str | None = None
    actor: str | None = None


@dataclass(frozen=True)
class CheckoutPreview:
    """Everything the checkout dialog shows before staff commit."""

    outstanding: Money
    unsettled_damages: Money
    overstay_days: int
    suggested_overstay_charge: Money
    is_early: bool
    refund_estimate: RefundDecision | None
    ledger: LedgerSummary


@dataclass(frozen=True)
class CheckoutSettlement:
    booking_id: uuid.UUID
    status: BookingStatus
    checked_out_at: datetime
    overstay_days: int
    new_charges: tuple[Charge, ...]
    refund: RefundDecision | None
    certification: CheckoutCertification
    ledger: LedgerSummary
    notes: str | None = None


# ---------------------------------------------------------------------------
# Overstay
# ---------------------------------------------------------------------------


def is_early_checkout(booking: BookingSnapshot, now: datetime, calendar: OperatingCalendar) -> bool:
    return elapsed(now, calendar.check_out_at(booking.check_out)) > _NO_TIME


def is_overstayed(booking: BookingSnapshot, now: datetime, calendar: OperatingCalendar) -> bool:
    return elapsed(calendar.check_out_at(booking.check_out), now) > _NO_TIME


def overstay_days(booking: BookingSnapshot, now: datetime, calendar: OperatingCalendar) -> int:
    """Whole days past the scheduled checkout instant, floored; 0 if not overstayed."""
    late_by = elapsed(calendar.check_out_at(booking.check_out), now)
    if late_by <= _NO_TIME:
        return 0
    return late_by // ONE_DAY


def suggested_overstay_charge(booking: BookingSnapshot, now: datetime, calendar: OperatingCalendar) -> Money:
    """Default offered to staff; never applied automatically."""
    return booking.nightly_rate * overstay_days(booking, now, calendar)


def _ensure_in_house(booking: BookingSnapshot) -> None:
    if booking.status is not BookingStatus.CHECKED_IN:
        raise InvariantViolation(f"Charges can only be posted on CHECKED_IN bookings, not {booking.status.value}")


def add_damage_charge(
    ledger: PaymentLedger,
    amount: Money,
    now: datetime,
    notes: str | None = None,
    posted_by: str | None = None,
) -> Charge:
    _ensure_in_house(ledger.booking)
    return ledger.post_charge(ChargeKind.DAMAGE, amount, now, notes=notes, posted_by=posted_by)


def add_overstay_charge(
    ledger: PaymentLedger,
    amount: Money,
    now: datetime,
    calendar: OperatingCalendar,
    notes: str | None = None,
    posted_by: str | None = None,
) -> Charge:
    _ensure_in_house(ledger.booking)
    if not is_overstayed(ledger.booking, now, calendar):
        raise NotOverstayedError("Booking has not passed its scheduled checkout time")
    return ledger.post_charge(ChargeKind.OVERSTAY, amount, now, notes=notes, posted_by=posted_by)


# ---------------------------------------------------------------------------
# Early-checkout refund
# ---------------------------------------------------------------------------


def used_nights(booking: BookingSnapshot, now: datetime, calendar: OperatingCalendar) -> int:
    """Nights consumed so far, rounded up and clamped to ``[1, booked]``."""
    whole, rest = divmod(elapsed(calendar.check_in_at(booking.check_in), now), ONE_DAY)
    used = whole + (1 if rest else 0)
    return max(1, min(used, booking.nights))


def compute_refund(
    booking: BookingSnapshot,
    now: datetime,
    request: RefundRequest,
    calendar: OperatingCalendar,
) -> RefundDecision:
    booked = booking.nights
    used = used_nights(booking, now, calendar)
    unused = booked - used
    eligible = booking.total_amount.scale(Fraction(unused, booked)).clamp_zero()

    if request.penalty.minor < 0:
        raise InvalidAmountError("Penalty cannot be negative")

    penalty = Money.zero()
    if request.policy is RefundPolicy.FLEXIBLE:
        suggested = eligible
    elif request.policy is RefundPolicy.PARTIAL:
        penalty = request.penalty
        suggested = (eligible - penalty).clamp_zero()
    else:
        suggested = Money.zero()

    reason = request.reason.strip() if request.reason and request.reason.strip() else None
    refund_amount = Money.zero()
    if request.approved:
        refund_amount = suggested if request.refund_amount is None else request.refund_amount
        if refund_amount.minor < 0 or refund_amount > eligible:
            raise InvalidAmountError(f"Refund must be between 0.00 and the eligible {eligible}")
        if refund_amount != suggested and reason is None:
            raise MissingReasonError("A reason is required when changing the suggested refund")

    return RefundDecision(
        policy=request.policy,
        booked_nights=booked,
        used_nights=used,
        unused_nights=unused,
        nightly_rate=booking.total_amount.scale(Fraction(1, booked)),
        eligible_amount=eligible,
        penalty=penalty,
        suggested_amount=suggested,
        approved=request.approved,
        refund_amount=refund_amount,
        reason=reason,
    )


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


def preview_checkout(
    ledger: PaymentLedger,
    now: datetime,
    calendar: OperatingCalendar,
    default_policy: RefundPolicy = RefundPolicy.NO_REFUND,
) -> CheckoutPreview:
    booking = ledger.booking
    early = is_early_checkout(booking, now, calendar)
    return CheckoutPreview(
        outstanding=ledger.outstanding(),
        unsettled_damages=ledger.unsettled_damages(),
        overstay_days=overstay_days(booking, now, calendar),
        suggested_overstay_charge=suggested_overstay_charge(booking, now, calendar),
        is_early=early,
        refund_estimate=compute_refund(booking, now, RefundRequest(policy=default_policy), calendar) if early else None,
        ledger=ledger.summary(),
    )


def complete_checkout(
    ledger: PaymentLedger,
    request: CheckoutRequest,
    now: datetime,
    calendar: OperatingCalendar,
    default_policy: RefundPolicy = RefundPolicy.NO_REFUND,
) -> CheckoutSettlement:
    """Decide a checkout. Raises before anything is staged for persistence.

    ``ledger`` itself is never modified; form charges go onto a copy.
    """
    booking = ledger.booking
    status = ensure_transition(booking.status, BookingStatus.CHECKED_OUT)

    if request.damages_cost.minor < 0 or request.overstay_charge.minor < 0:
        raise InvalidAmountError("Checkout charges cannot be negative")

    staged = ledger.copy()
    new_charges: list[Charge] = []
    if request.damages_cost.is_positive():
        new_charges.append(
            add_damage_charge(staged, request.damages_cost, now, notes=request.damages_notes, posted_by=request.actor)
        )
    if request.overstay_charge.is_positive():
        new_charges.append(
            add_overstay_charge(
                staged, request.overstay_charge, now, calendar, notes=request.overstay_notes, posted_by=request.actor
            )
        )

    certification = CheckoutCertification.from_ledger(
        staged,
        certify_no_outstanding=request.certify_no_outstanding,
        certify_no_damages=request.certify_no_damages,
    )
    outstanding = certification.outstanding_amount
    if outstanding.is_positive():
        raise OutstandingBalanceError(outstanding)
    if not certification.is_satisfied():
        raise OutstandingBalanceError(
            outstanding,
            "Please certify guest has no outstanding payment and no damages before checkout",
        )

    refund = None
    if is_early_checkout(booking, now, calendar):
        refund = compute_refund(booking, now, request.refund or RefundRequest(policy=default_policy), calendar)

    return CheckoutSettlement(
        booking_id=booking.id,
        status=status,
        checked_out_at=now,
        overstay_days=overstay_days(booking, now, calendar),
        new_charges=tuple(new_charges),
        refund=refund,
        certification=certification,
        ledger=staged.summary(),
        notes=request.notes or None,
    )
