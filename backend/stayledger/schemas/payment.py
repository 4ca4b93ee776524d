"""Pydantic v2 schemas for payments, charges and the booking ledger."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stayledger.core.enums import BookingStatus, ChargeKind, PaymentStatus, RefundPolicy
from stayledger.core.ledger import PaymentLedger
from stayledger.core.money import Money
from stayledger.models.booking import Booking
from stayledger.models.charge import Charge
from stayledger.models.payment import Payment
from stayledger.models.refund import Refund
from stayledger.schemas.common import LedgerSummaryResponse, MoneyInput

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PaymentCreate(BaseModel):
    """A payment received at the desk.

    ``amount`` accepts typed text (``"40,000"``); the reference is the
    receipt, transfer or POS slip number.
    """

    amount: MoneyInput
    reference: str = Field(..., max_length=255)
    notes: str | None = None


class ChargeCreate(BaseModel):
    """A damage or overstay amount posted against an in-house booking."""

    amount: MoneyInput
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PaymentResponse(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    amount: Decimal
    currency: str
    reference: str
    notes: str | None = None
    recorded_by: str | None = None
    created_at: datetime

    @classmethod
    def from_row(cls, row: Payment) -> "PaymentResponse":
        return cls(
            id=row.id,
            booking_id=row.booking_id,
            amount=Money(row.amount_minor).to_decimal(),
            currency=row.currency,
            reference=row.reference,
            notes=row.notes,
            recorded_by=row.recorded_by,
            created_at=row.created_at,
        )


class ChargeResponse(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    kind: ChargeKind
    amount: Decimal
    notes: str | None = None
    posted_by: str | None = None
    posted_at: datetime

    @classmethod
    def from_row(cls, row: Charge) -> "ChargeResponse":
        return cls(
            id=row.id,
            booking_id=row.booking_id,
            kind=ChargeKind(row.kind),
            amount=Money(row.amount_minor).to_decimal(),
            notes=row.notes,
            posted_by=row.posted_by,
            posted_at=row.posted_at,
        )


class RefundRecordResponse(BaseModel):
    """The refund approved at an early checkout, as stored."""

    id: uuid.UUID
    policy: RefundPolicy
    booked_nights: int
    used_nights: int
    eligible_amount: Decimal
    penalty: Decimal
    suggested_amount: Decimal
    refund_amount: Decimal
    reason: str | None = None
    recorded_by: str | None = None
    created_at: datetime

    @classmethod
    def from_row(cls, row: Refund) -> "RefundRecordResponse":
        return cls(
            id=row.id,
            policy=RefundPolicy(row.policy),
            booked_nights=row.booked_nights,
            used_nights=row.used_nights,
            eligible_amount=Money(row.eligible_minor).to_decimal(),
            penalty=Money(row.penalty_minor).to_decimal(),
            suggested_amount=Money(row.suggested_minor).to_decimal(),
            refund_amount=Money(row.refund_minor).to_decimal(),
            reason=row.reason,
            recorded_by=row.recorded_by,
            created_at=row.created_at,
        )


class PaymentRecordedResponse(BaseModel):
    """The new payment and the ledger position right after it."""

    payment: PaymentResponse
    ledger: LedgerSummaryResponse


class ChargePostedResponse(BaseModel):
    charge: ChargeResponse
    ledger: LedgerSummaryResponse


class PaymentListResponse(BaseModel):
    items: list[PaymentResponse]
    total_paid: Decimal


class LedgerResponse(BaseModel):
    """Everything owed and paid on one booking.

    ``suggested_payment`` prefills the payment form with the outstanding balance.
    """

    booking_id: uuid.UUID
    currency: str
    summary: LedgerSummaryResponse
    suggested_payment: Decimal
    payments: list[PaymentResponse]
    charges: list[ChargeResponse]
    refund: RefundRecordResponse | None = None

    @classmethod
    def build(cls, booking: Booking, ledger: PaymentLedger) -> "LedgerResponse":
        return cls(
            booking_id=booking.id,
            currency=booking.currency,
            summary=LedgerSummaryResponse.from_summary(ledger.summary()),
            suggested_payment=ledger.outstanding().to_decimal(),
            payments=[PaymentResponse.from_row(p) for p in booking.payments],
            charges=[ChargeResponse.from_row(c) for c in booking.charges],
            refund=RefundRecordResponse.from_row(booking.refund) if booking.refund else None,
        )


class TenantPaymentResponse(PaymentResponse):
    """A payment plus the stay it settles, for the tenant-wide payments page."""

    unit_id: uuid.UUID
    unit_name: str | None = None
    guest_name: str | None = None
    booking_status: BookingStatus

    @classmethod
    def from_rows(cls, payment: Payment, booking: Booking) -> "TenantPaymentResponse":
        return cls(
            **PaymentResponse.from_row(payment).model_dump(),
            unit_id=booking.unit_id,
            unit_name=booking.unit.name if booking.unit else None,
            guest_name=booking.guest_name,
            booking_status=BookingStatus(booking.status),
        )


class TenantPaymentListResponse(BaseModel):
    items: list[TenantPaymentResponse]
    total: int


class PendingBalanceResponse(BaseModel):
    """A live booking that still owes money."""

    booking_id: uuid.UUID
    unit_id: uuid.UUID
    unit_name: str | None = None
    guest_name: str | None = None
    check_in: date
    check_out: date
    booking_status: BookingStatus
    payment_status: PaymentStatus
    currency: str
    total_amount: Decimal
    charges_total: Decimal
    total_bill: Decimal
    paid_total: Decimal
    outstanding: Decimal

    @classmethod
    def build(cls, booking: Booking, ledger: PaymentLedger) -> "PendingBalanceResponse":
        summary = ledger.summary()
        return cls(
            booking_id=booking.id,
            unit_id=booking.unit_id,
            unit_name=booking.unit.name if booking.unit else None,
            guest_name=booking.guest_name,
            check_in=booking.check_in,
            check_out=booking.check_out,
            booking_status=BookingStatus(booking.status),
            payment_status=summary.payment_status,
            currency=booking.currency,
            total_amount=summary.total_amount.to_decimal(),
            charges_total=summary.charges_total.to_decimal(),
            total_bill=summary.total_bill.to_decimal(),
            paid_total=summary.paid_total.to_decimal(),
            outstanding=summary.outstanding_amount.to_decimal(),
        )


class PendingBalanceListResponse(BaseModel):
    items: list[PendingBalanceResponse]
    total_outstanding: Decimal
