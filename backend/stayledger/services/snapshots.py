"""Conversions between ORM rows and engine records."""

from decimal import Decimal

from stayledger.core import records
from stayledger.core.checkout import RefundDecision
from stayledger.core.enums import BookingStatus, ChargeKind, PromotionKind
from stayledger.core.ledger import PaymentLedger
from stayledger.core.money import Money
from stayledger.models import Booking, Charge, Payment, Refund, Unit


def promotion_of(unit: Unit) -> records.Promotion | None:
    if unit.promo_kind is None or unit.promo_value_hundredths is None:
        return None
    if unit.promo_start_date is None or unit.promo_end_date is None:
        return None
    kind = PromotionKind(unit.promo_kind)
    return records.Promotion(
        kind=kind,
        value=Decimal(unit.promo_value_hundredths) / 100,
        start_date=unit.promo_start_date,
        end_date=unit.promo_end_date,
        label=unit.promo_label or "",
        active=unit.promo_active,
    )


def store_promotion(unit: Unit, promotion: records.Promotion) -> None:
    unit.promo_kind = promotion.kind.value
    unit.promo_value_hundredths = int(promotion.value * 100)
    unit.promo_start_date = promotion.start_date
    unit.promo_end_date = promotion.end_date
    unit.promo_label = promotion.label or None
    unit.promo_active = promotion.active


def unit_rate(unit: Unit) -> records.UnitRate:
    return records.UnitRate(
        unit_id=unit.id,
        base_price=Money(unit.base_price_minor),
        promotion=promotion_of(unit),
        currency=unit.currency,
    )


def booking_snapshot(booking: Booking) -> records.BookingSnapshot:
    return records.BookingSnapshot(
        id=booking.id,
        unit_id=booking.unit_id,
        check_in=booking.check_in,
        check_out=booking.check_out,
        status=BookingStatus(booking.status),
        total_amount=Money(booking.total_amount_minor),
        nightly_rate=Money(booking.nightly_rate_minor),
        currency=booking.currency,
    )


def payment_record(row: Payment) -> records.Payment:
    return records.Payment(
        id=row.id,
        booking_id=row.booking_id,
        amount=Money(row.amount_minor),
        reference=row.reference,
        notes=row.notes,
        recorded_by=row.recorded_by,
        created_at=row.created_at,
    )


def charge_record(row: Charge) -> records.Charge:
    return records.Charge(
        id=row.id,
        booking_id=row.booking_id,
        kind=ChargeKind(row.kind),
        amount=Money(row.amount_minor),
        notes=row.notes,
        posted_by=row.posted_by,
        posted_at=row.posted_at,
    )


def build_ledger(booking: Booking) -> PaymentLedger:
    return PaymentLedger(
        booking_snapshot(booking),
        payments=[payment_record(p) for p in booking.payments],
        charges=[charge_record(c) for c in booking.charges],
    )


# ---------------------------------------------------------------------------
# Engine records -> rows
# ---------------------------------------------------------------------------


def payment_row(payment: records.Payment, currency: str) -> Payment:
    return Payment(
        id=payment.id,
        booking_id=payment.booking_id,
        amount_minor=payment.amount.minor,
        currency=currency,
        reference=payment.reference,
        notes=payment.notes,
        recorded_by=payment.recorded_by,
        created_at=payment.created_at,
    )


def charge_row(charge: records.Charge) -> Charge:
    return Charge(
        id=charge.id,
        booking_id=charge.booking_id,
        kind=charge.kind.value,
        amount_minor=charge.amount.minor,
        notes=charge.notes,
        posted_by=charge.posted_by,
        posted_at=charge.posted_at,
    )


def refund_row(booking: Booking, decision: RefundDecision, recorded_by: str | None, now) -> Refund:
    return Refund(
        booking_id=booking.id,
        policy=decision.policy.value,
        booked_nights=decision.booked_nights,
        used_nights=decision.used_nights,
        eligible_minor=decision.eligible_amount.minor,
        penalty_minor=decision.penalty.minor,
        suggested_minor=decision.suggested_amount.minor,
        refund_minor=decision.refund_amount.minor,
        approved=decision.approved,
        reason=decision.reason,
        recorded_by=recorded_by,
        created_at=now,
    )
