"""Tests for the append-only payment ledger and derived payment status."""

import uuid
from datetime import date, datetime, timezone

import pytest

from stayledger.core.enums import BookingStatus, ChargeKind, PaymentStatus
from stayledger.core.errors import InvalidAmountError, MissingReferenceError, PaymentNotAllowedError
from stayledger.core.ledger import PaymentLedger, derive_payment_status
from stayledger.core.money import Money
from stayledger.core.records import BookingSnapshot

NOW = datetime(2025, 1, 11, 9, 0, tzinfo=timezone.utc)


def _ledger(status: BookingStatus = BookingStatus.CHECKED_IN, total: int = 100_000) -> PaymentLedger:
    booking = BookingSnapshot(
        id=uuid.uuid4(),
        unit_id=uuid.uuid4(),
        check_in=date(2025, 1, 10),
        check_out=date(2025, 1, 14),
        status=status,
        total_amount=Money.major(total),
        nightly_rate=Money.major(total // 4),
    )
    return PaymentLedger(booking)


class TestDerivePaymentStatus:
    @pytest.mark.parametrize(
        ("owed", "paid", "expected"),
        [
            (100, 0, PaymentStatus.UNPAID),
            (100, 40, PaymentStatus.PARTPAID),
            (100, 100, PaymentStatus.PAID),
            (100, 120, PaymentStatus.PAID),
        ],
    )
    def test_status(self, owed: int, paid: int, expected: PaymentStatus) -> None:
        assert derive_payment_status(Money.major(owed), Money.major(paid)) is expected


class TestRecordPayment:
    def test_partial_payments(self) -> None:
        ledger = _ledger()
        ledger.record_payment(Money.major(40_000), "POS-001", NOW)
        assert ledger.payment_status() is PaymentStatus.PARTPAID

        ledger.record_payment(Money.major(35_000), "TRF-002", NOW)
        assert ledger.paid() == Money.major(75_000)
        assert ledger.outstanding() == Money.major(25_000)
        assert ledger.payment_status() is PaymentStatus.PARTPAID

    def test_paid_in_full_refuses_more(self) -> None:
        ledger = _ledger()
        ledger.record_payment(Money.major(100_000), "TRF-1", NOW)
        assert ledger.payment_status() is PaymentStatus.PAID
        with pytest.raises(PaymentNotAllowedError):
            ledger.record_payment(Money.major(1), "TRF-2", NOW)
        assert len(ledger.payments) == 1

    def test_overpayment_is_kept_and_outstanding_clamps(self) -> None:
        ledger = _ledger()
        ledger.record_payment(Money.major(120_000), "TRF-1", NOW)
        assert ledger.outstanding() == Money.zero()
        assert ledger.paid() == Money.major(120_000)

    @pytest.mark.parametrize("minor", [0, -1])
    def test_amount_must_be_positive(self, minor: int) -> None:
        ledger = _ledger()
        with pytest.raises(InvalidAmountError):
            ledger.record_payment(Money(minor), "REF", NOW)
        assert ledger.payments == ()

    @pytest.mark.parametrize("reference", ["", "   "])
    def test_reference_required(self, reference: str) -> None:
        ledger = _ledger()
        with pytest.raises(MissingReferenceError):
            ledger.record_payment(Money.major(10), reference, NOW)

    def test_cancelled_booking_refuses_payments(self) -> None:
        ledger = _ledger(BookingStatus.CANCELLED)
        assert not ledger.can_take_payment()
        with pytest.raises(PaymentNotAllowedError):
            ledger.record_payment(Money.major(10), "REF", NOW)

    def test_reference_is_trimmed(self) -> None:
        payment = _ledger().record_payment(Money.major(10), "  POS-9 ", NOW, notes="", recorded_by="staff")
        assert payment.reference == "POS-9"
        assert payment.notes is None
        assert payment.recorded_by == "staff"


class TestMonotonicity:
    @pytest.mark.parametrize(
        "installments",
        [
            (100_000,),
            (40_000, 35_000, 25_000),
            (1, 1, 99_998, 5),
            (60_000, 60_000),
            (100_001, 1),
            (25_000, 25_000, 25_000, 25_000, 25_000),
        ],
    )
    def test_outstanding_never_rises_after_a_payment(self, installments: tuple[int, ...]) -> None:
        ledger = _ledger()
        owed = ledger.owed()
        outstanding, paid = ledger.outstanding(), ledger.paid()
        for i, amount in enumerate(installments):
            if not ledger.can_take_payment():
                with pytest.raises(PaymentNotAllowedError):
                    ledger.record_payment(Money.major(amount), f"REF-{i}", NOW)
            else:
                ledger.record_payment(Money.major(amount), f"REF-{i}", NOW)
            assert ledger.owed() == owed
            assert ledger.outstanding() <= outstanding
            assert ledger.paid() >= paid
            outstanding, paid = ledger.outstanding(), ledger.paid()
        assert ledger.outstanding() == (owed - ledger.paid()).clamp_zero()


class TestCharges:
    def test_charges_raise_what_is_owed(self) -> None:
        ledger = _ledger()
        ledger.record_payment(Money.major(100_000), "TRF-1", NOW)
        assert ledger.payment_status() is PaymentStatus.PAID

        ledger.post_charge(ChargeKind.DAMAGE, Money.major(15_000), NOW, notes="Broken lamp")
        summary = ledger.summary()
        assert summary.total_bill == Money.major(115_000)
        assert summary.charges_total == Money.major(15_000)
        assert summary.outstanding_amount == Money.major(15_000)
        assert summary.payment_status is PaymentStatus.PARTPAID
        assert ledger.unsettled_damages() == Money.major(15_000)

    def test_damages_settled_once_paid(self) -> None:
        ledger = _ledger()
        ledger.post_charge(ChargeKind.DAMAGE, Money.major(15_000), NOW)
        ledger.record_payment(Money.major(115_000), "TRF-1", NOW)
        assert ledger.unsettled_damages() == Money.zero()

    def test_charges_by_kind(self) -> None:
        ledger = _ledger()
        ledger.post_charge(ChargeKind.DAMAGE, Money.major(5_000), NOW)
        ledger.post_charge(ChargeKind.OVERSTAY, Money.major(25_000), NOW)
        assert ledger.charges_total(ChargeKind.DAMAGE) == Money.major(5_000)
        assert ledger.charges_total(ChargeKind.OVERSTAY) == Money.major(25_000)
        assert ledger.damages_total() == Money.major(5_000)
        assert ledger.overstay_total() == Money.major(25_000)

    def test_negative_charge(self) -> None:
        with pytest.raises(InvalidAmountError):
            _ledger().post_charge(ChargeKind.DAMAGE, Money(-1), NOW)

    def test_copy_does_not_share_entries(self) -> None:
        ledger = _ledger()
        staged = ledger.copy()
        staged.post_charge(ChargeKind.DAMAGE, Money.major(1), NOW)
        assert ledger.charges == ()
        assert len(staged.charges) == 1
