"""Payments API router: record payments and read a booking's ledger."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from stayledger.api.deps import get_actor, get_clock, get_db
from stayledger.core.clock import Clock
from stayledger.core.money import Money
from stayledger.core.records import ActorContext
from stayledger.schemas.common import ERROR_RESPONSES, LedgerSummaryResponse
from stayledger.schemas.payment import (
    LedgerResponse,
    PaymentCreate,
    PaymentListResponse,
    PaymentRecordedResponse,
    PaymentResponse,
)
from stayledger.services import ledger_service

router = APIRouter(prefix="/api/v1/bookings", tags=["payments"], responses=ERROR_RESPONSES)


@router.post(
    "/{booking_id}/payments",
    response_model=PaymentRecordedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment against a booking",
)
async def record_payment(
    booking_id: uuid.UUID,
    body: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
) -> PaymentRecordedResponse:
    """Append a payment. Allowed only while the booking is UNPAID or PARTPAID and not cancelled."""
    payment, ledger = await ledger_service.record_payment(
        db,
        ctx,
        booking_id,
        amount=Money.from_decimal(body.amount),
        reference=body.reference,
        now=clock.now(),
        notes=body.notes,
    )
    return PaymentRecordedResponse(
        payment=PaymentResponse.from_row(payment),
        ledger=LedgerSummaryResponse.from_summary(ledger.summary()),
    )


@router.get(
    "/{booking_id}/payments",
    response_model=PaymentListResponse,
    summary="List payments on a booking",
)
async def list_payments(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> PaymentListResponse:
    booking, ledger = await ledger_service.get_ledger(db, ctx, booking_id)
    return PaymentListResponse(
        items=[PaymentResponse.from_row(p) for p in booking.payments],
        total_paid=ledger.paid().to_decimal(),
    )


@router.get(
    "/{booking_id}/ledger",
    response_model=LedgerResponse,
    summary="Full ledger: total, charges, payments and outstanding balance",
)
async def get_ledger(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> LedgerResponse:
    booking, ledger = await ledger_service.get_ledger(db, ctx, booking_id)
    return LedgerResponse.build(booking, ledger)
