"""Per-booking payment ledger.

``owed`` is the committed booking total plus every posted charge; ``paid``
is the sum of payments. Payment status is derived from those two numbers on
every call and is never stored.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from stayledger.core.enums import BookingStatus, ChargeKind, PaymentStatus
from stayledger.core.errors import (
    InvalidAmountError,
    MissingReferenceError,
    PaymentNotAllowedError,
)
from stayledger.core.money import Money, money_sum
from stayledger.core.records import BookingSnapshot, Charge, Payment


@dataclass(frozen=True)
class LedgerSummary:
    total_amount: Money
    charges_total: Money
    total_bill: Money
    paid_total: Money
    outstanding_amount: Money
    payment_status: PaymentStatus


def derive_payment_status(owed: Money, paid: Money) -> PaymentStatus:
    if paid >= owed:
        return PaymentStatus.PAID
    if paid.is_zero():
        return PaymentStatus.UNPAID
    return PaymentStatus.PARTPAID


class PaymentLedger:
    """Append-only view over one booking's payments and charges."""

    def __init__(
        self,
        booking: BookingSnapshot,
        payments: Iterable[Payment] = (),
        charges: Iterable[Charge] = (),
    ) -> None:
        self.booking = booking
        self._payments: list[Payment] = list(payments)
        self._charges: list[Charge] = list(charges)

    @property
    def payments(self) -> tuple[Payment, ...]:
        return tuple(self._payments)

    @property
    def charges(self) -> tuple[Charge, ...]:
        return tuple(self._charges)

    def copy(self) -> PaymentLedger:
        return PaymentLedger(self.booking, self._payments, self._charges)

    # -- derived amounts ----------------------------------------------------

    def charges_total(self, kind: ChargeKind | None = None) -> Money:
        return money_sum(c.amount for c in self._charges if kind is None or c.kind is kind)

    def damages_total(self) -> Money:
        return self.charges_total(ChargeKind.DAMAGE)

    def overstay_total(self) -> Money:
        return self.charges_total(ChargeKind.OVERSTAY)

    def owed(self) -> Money:
        return self.booking.total_amount + self.charges_total()

    def paid(self) -> Money:
        return money_sum(p.amount for p in self._payments)

    def outstanding(self) -> Money:
        return (self.owed() - self.paid()).clamp_zero()

    def unsettled_damages(self) -> Money:
        """Part of the posted damage charges not yet covered by payments."""
        return min(self.damages_total(), self.outstanding())

    def payment_status(self) -> PaymentStatus:
        return derive_payment_status(self.owed(), self.paid())

    def can_take_payment(self) -> bool:
        if self.booking.status is BookingStatus.CANCELLED:
            return False
        return self.payment_status() in (PaymentStatus.UNPAID, PaymentStatus.PARTPAID)

    def summary(self) -> LedgerSummary:
        return LedgerSummary(
            total_amount=self.booking.total_amount,
            charges_total=self.charges_total(),
            total_bill=self.owed(),
            paid_total=self.paid(),
            outstanding_amount=self.outstanding(),
            payment_status=self.payment_status(),
        )

    # -- writes -------------------------------------------------------------

    def record_payment(
        self,
        amount: Money,
        reference: str,
        now: datetime,
        notes: str | None = None,
        recorded_by: str | None = None,
    ) -> Payment:
        if not amount.is_positive():
            raise InvalidAmountError("Payment amount must be greater than 0")
        if not reference or not reference.strip():
            raise MissingReferenceError("Payment reference is required")
        if self.booking.status is BookingStatus.CANCELLED:
            raise PaymentNotAllowedError("Cancelled bookings cannot take payments")
        if not self.can_take_payment():
            raise PaymentNotAllowedError("Payment allowed only for UNPAID or PARTPAID bookings")

        payment = Payment(
            booking_id=self.booking.id,
            amount=amount,
            reference=reference.strip(),
            notes=notes or None,
            recorded_by=recorded_by,
            created_at=now,
        )
        self._payments.append(payment)
        return payment

    def post_charge(
        self,
        kind: ChargeKind,
        amount: Money,
        now: datetime,
        notes: str | None = None,
        posted_by: str | None = None,
    ) -> Charge:
        if amount.minor < 0:
            raise InvalidAmountError(f"{kind.value.title()} charge cannot be negative")
        charge = Charge(
            booking_id=self.booking.id,
            kind=kind,
            amount=amount,
            notes=notes or None,
            posted_by=posted_by,
            posted_at=now,
        )
        self._charges.append(charge)
        return charge
