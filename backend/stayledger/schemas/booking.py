"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stayledger.core.enums import BookingStatus, PaymentStatus
from stayledger.core.money import Money
from stayledger.core.pricing import StayQuote
from stayledger.core.records import DateRange
from stayledger.models.booking import Booking
from stayledger.schemas.common import MoneyInput
from stayledger.schemas.payment import RefundRecordResponse
from stayledger.services.snapshots import build_ledger

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class QuoteRequest(BaseModel):
    """Price a stay without reserving it."""

    unit_id: uuid.UUID
    check_in: date
    check_out: date
    total_amount: MoneyInput | None = None

    @property
    def stay(self) -> DateRange:
        return DateRange(self.check_in, self.check_out)


class BookingCreate(BaseModel):
    """Schema for creating a new booking.

    ``total_amount`` overrides the computed total; the computed figure is kept
    alongside it for audit.
    """

    unit_id: uuid.UUID
    guest_id: uuid.UUID
    guest_name: str | None = Field(None, max_length=255)
    check_in: date
    check_out: date
    status: BookingStatus = BookingStatus.PENDING
    total_amount: MoneyInput | None = None
    special_requests: str | None = None

    @property
    def stay(self) -> DateRange:
        return DateRange(self.check_in, self.check_out)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class QuoteResponse(BaseModel):
    nights: int
    base_price: Decimal
    nightly_rate: Decimal
    computed_total: Decimal
    total: Decimal
    discount: Decimal
    promotion_label: str | None = None

    @classmethod
    def from_quote(cls, quote: StayQuote) -> "QuoteResponse":
        return cls(
            nights=quote.nights,
            base_price=quote.base_price.to_decimal(),
            nightly_rate=quote.nightly_rate.to_decimal(),
            computed_total=quote.computed_total.to_decimal(),
            total=quote.total.to_decimal(),
            discount=quote.discount.to_decimal(),
            promotion_label=quote.promotion_label,
        )


class BookingResponse(BaseModel):
    """Booking with its derived payment position."""

    id: uuid.UUID
    unit_id: uuid.UUID
    guest_id: uuid.UUID
    guest_name: str | None = None
    check_in: date
    check_out: date
    nights: int
    status: BookingStatus
    currency: str
    nightly_rate: Decimal
    computed_total: Decimal
    total_amount: Decimal
    promotion_label: str | None = None
    special_requests: str | None = None
    checkout_notes: str | None = None
    payment_status: PaymentStatus
    outstanding_amount: Decimal
    refund: RefundRecordResponse | None = None
    created_by: str | None = None
    checked_in_at: datetime | None = None
    checked_out_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        ledger = build_ledger(booking)
        return cls(
            id=booking.id,
            unit_id=booking.unit_id,
            guest_id=booking.guest_id,
            guest_name=booking.guest_name,
            check_in=booking.check_in,
            check_out=booking.check_out,
            nights=ledger.booking.nights,
            status=BookingStatus(booking.status),
            currency=booking.currency,
            nightly_rate=Money(booking.nightly_rate_minor).to_decimal(),
            computed_total=Money(booking.computed_total_minor).to_decimal(),
            total_amount=Money(booking.total_amount_minor).to_decimal(),
            promotion_label=booking.promotion_label,
            special_requests=booking.special_requests,
            checkout_notes=booking.checkout_notes,
            payment_status=ledger.payment_status(),
            outstanding_amount=ledger.outstanding().to_decimal(),
            refund=RefundRecordResponse.from_row(booking.refund) if booking.refund else None,
            created_by=booking.created_by,
            checked_in_at=booking.checked_in_at,
            checked_out_at=booking.checked_out_at,
            cancelled_at=booking.cancelled_at,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class BookingListResponse(BaseModel):
    """Paginated list of bookings."""

    items: list[BookingResponse]
    total: int
