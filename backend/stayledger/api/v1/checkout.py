"""Checkout API router: preview, in-house charges and the checkout itself."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from stayledger.api.deps import get_actor, get_calendar, get_clock, get_db
from stayledger.core.clock import Clock, OperatingCalendar
from stayledger.core.money import Money
from stayledger.core.records import ActorContext
from stayledger.schemas.checkout import CheckoutCreate, CheckoutPreviewResponse, CheckoutResponse
from stayledger.schemas.common import ERROR_RESPONSES, LedgerSummaryResponse
from stayledger.schemas.payment import ChargeCreate, ChargePostedResponse, ChargeResponse
from stayledger.services import checkout_service, ledger_service

router = APIRouter(prefix="/api/v1/bookings", tags=["checkout"], responses=ERROR_RESPONSES)


@router.get(
    "/{booking_id}/checkout",
    response_model=CheckoutPreviewResponse,
    summary="Preview balances, overstay and refund before checkout",
)
async def preview_checkout(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
    calendar: OperatingCalendar = Depends(get_calendar),
) -> CheckoutPreviewResponse:
    preview = await checkout_service.preview(db, ctx, booking_id, clock.now(), calendar)
    return CheckoutPreviewResponse.from_preview(booking_id, preview)


@router.post(
    "/{booking_id}/charges/damage",
    response_model=ChargePostedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a damage charge on an in-house booking",
)
async def post_damage_charge(
    booking_id: uuid.UUID,
    body: ChargeCreate,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
) -> ChargePostedResponse:
    charge, ledger = await ledger_service.post_damage_charge(
        db,
        ctx,
        booking_id,
        amount=Money.from_decimal(body.amount),
        now=clock.now(),
        notes=body.notes,
    )
    return ChargePostedResponse(
        charge=ChargeResponse.from_row(charge),
        ledger=LedgerSummaryResponse.from_summary(ledger.summary()),
    )


@router.post(
    "/{booking_id}/charges/overstay",
    response_model=ChargePostedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a staff-confirmed overstay charge",
)
async def post_overstay_charge(
    booking_id: uuid.UUID,
    body: ChargeCreate,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
    calendar: OperatingCalendar = Depends(get_calendar),
) -> ChargePostedResponse:
    """The suggested figure comes from ``GET /checkout``; staff may post a different one."""
    charge, ledger = await ledger_service.post_overstay_charge(
        db,
        ctx,
        booking_id,
        amount=Money.from_decimal(body.amount),
        now=clock.now(),
        calendar=calendar,
        notes=body.notes,
    )
    return ChargePostedResponse(
        charge=ChargeResponse.from_row(charge),
        ledger=LedgerSummaryResponse.from_summary(ledger.summary()),
    )


@router.post(
    "/{booking_id}/check-out",
    response_model=CheckoutResponse,
    summary="Check the guest out",
)
async def check_out_booking(
    booking_id: uuid.UUID,
    body: CheckoutCreate,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
    calendar: OperatingCalendar = Depends(get_calendar),
) -> CheckoutResponse:
    """Complete checkout.

    Rejected with 409 while anything is outstanding or either certification
    is unticked; nothing is written in that case.
    """
    settlement = await checkout_service.complete_checkout(
        db,
        ctx,
        booking_id,
        body.to_request(ctx.label),
        clock.now(),
        calendar,
    )
    return CheckoutResponse.from_settlement(settlement)
