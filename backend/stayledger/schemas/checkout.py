"""Pydantic v2 schemas for the checkout dialog."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stayledger.core.checkout import (
    CheckoutPreview,
    CheckoutRequest,
    CheckoutSettlement,
    RefundDecision,
    RefundRequest,
)
from stayledger.core.enums import BookingStatus, RefundPolicy
from stayledger.core.money import Money
from stayledger.schemas.common import LedgerSummaryResponse, MoneyInput, to_money
from stayledger.schemas.payment import ChargeResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RefundInput(BaseModel):
    """Refund terms for an early departure.

    Leave ``refund_amount`` empty to accept the suggested figure; a different
    figure needs a ``reason``.
    """

    policy: RefundPolicy = RefundPolicy.NO_REFUND
    penalty: MoneyInput = Decimal("0")
    approved: bool = False
    refund_amount: MoneyInput | None = None
    reason: str | None = None

    def to_request(self) -> RefundRequest:
        return RefundRequest(
            policy=self.policy,
            penalty=Money.from_decimal(self.penalty),
            approved=self.approved,
            refund_amount=to_money(self.refund_amount),
            reason=self.reason,
        )


class CheckoutCreate(BaseModel):
    """The checkout form: certifications, last-minute charges and refund."""

    certify_no_outstanding: bool = False
    certify_no_damages: bool = False
    damages_cost: MoneyInput = Decimal("0")
    damages_notes: str | None = None
    overstay_charge: MoneyInput = Decimal("0")
    overstay_notes: str | None = None
    refund: RefundInput | None = None
    notes: str | None = Field(None, max_length=2000)

    def to_request(self, actor: str) -> CheckoutRequest:
        return CheckoutRequest(
            certify_no_outstanding=self.certify_no_outstanding,
            certify_no_damages=self.certify_no_damages,
            damages_cost=Money.from_decimal(self.damages_cost),
            damages_notes=self.damages_notes,
            overstay_charge=Money.from_decimal(self.overstay_charge),
            overstay_notes=self.overstay_notes,
            refund=self.refund.to_request() if self.refund else None,
            notes=self.notes,
            actor=actor,
        )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RefundResponse(BaseModel):
    policy: RefundPolicy
    booked_nights: int
    used_nights: int
    unused_nights: int
    nightly_rate: Decimal
    eligible_amount: Decimal
    penalty: Decimal
    suggested_amount: Decimal
    approved: bool
    refund_amount: Decimal
    reason: str | None = None

    @classmethod
    def from_decision(cls, decision: RefundDecision) -> "RefundResponse":
        return cls(
            policy=decision.policy,
            booked_nights=decision.booked_nights,
            used_nights=decision.used_nights,
            unused_nights=decision.unused_nights,
            nightly_rate=decision.nightly_rate.to_decimal(),
            eligible_amount=decision.eligible_amount.to_decimal(),
            penalty=decision.penalty.to_decimal(),
            suggested_amount=decision.suggested_amount.to_decimal(),
            approved=decision.approved,
            refund_amount=decision.refund_amount.to_decimal(),
            reason=decision.reason,
        )


class CheckoutPreviewResponse(BaseModel):
    """What the checkout dialog shows before staff commit."""

    booking_id: uuid.UUID
    outstanding: Decimal
    unsettled_damages: Decimal
    overstay_days: int
    suggested_overstay_charge: Decimal
    is_early: bool
    refund_estimate: RefundResponse | None = None
    ledger: LedgerSummaryResponse

    @classmethod
    def from_preview(cls, booking_id: uuid.UUID, preview: CheckoutPreview) -> "CheckoutPreviewResponse":
        return cls(
            booking_id=booking_id,
            outstanding=preview.outstanding.to_decimal(),
            unsettled_damages=preview.unsettled_damages.to_decimal(),
            overstay_days=preview.overstay_days,
            suggested_overstay_charge=preview.suggested_overstay_charge.to_decimal(),
            is_early=preview.is_early,
            refund_estimate=RefundResponse.from_decision(preview.refund_estimate) if preview.refund_estimate else None,
            ledger=LedgerSummaryResponse.from_summary(preview.ledger),
        )


class CheckoutResponse(BaseModel):
    booking_id: uuid.UUID
    status: BookingStatus
    checked_out_at: datetime
    overstay_days: int
    new_charges: list[ChargeResponse]
    refund: RefundResponse | None = None
    ledger: LedgerSummaryResponse
    notes: str | None = None

    @classmethod
    def from_settlement(cls, settlement: CheckoutSettlement) -> "CheckoutResponse":
        return cls(
            booking_id=settlement.booking_id,
            status=settlement.status,
            checked_out_at=settlement.checked_out_at,
            overstay_days=settlement.overstay_days,
            new_charges=[
                ChargeResponse(
                    id=c.id,
                    booking_id=c.booking_id,
                    kind=c.kind,
                    amount=c.amount.to_decimal(),
                    notes=c.notes,
                    posted_by=c.posted_by,
                    posted_at=c.posted_at,
                )
                for c in settlement.new_charges
            ],
            refund=RefundResponse.from_decision(settlement.refund) if settlement.refund else None,
            ledger=LedgerSummaryResponse.from_summary(settlement.ledger),
            notes=settlement.notes,
        )
