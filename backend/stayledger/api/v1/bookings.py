"""Bookings API router.

Tenant rule: every query filters on the ``X-Tenant-ID`` of the caller, so a
booking from another tenant is indistinguishable from a missing one (404).
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stayledger.api.deps import get_actor, get_calendar, get_clock, get_db
from stayledger.core.clock import Clock, OperatingCalendar
from stayledger.core.enums import BookingStatus, PaymentStatus
from stayledger.core.records import ActorContext
from stayledger.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    QuoteRequest,
    QuoteResponse,
)
from stayledger.schemas.common import ERROR_RESPONSES, to_money
from stayledger.services import booking_service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"], responses=ERROR_RESPONSES)


# ---------------------------------------------------------------------------
# Pricing and creation
# ---------------------------------------------------------------------------


@router.post(
    "/quote",
    response_model=QuoteResponse,
    summary="Price a stay without booking it",
)
async def quote_stay(
    body: QuoteRequest,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> QuoteResponse:
    quote = await booking_service.quote_stay(db, ctx, body.unit_id, body.stay, to_money(body.total_amount))
    return QuoteResponse.from_quote(quote)


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
    calendar: OperatingCalendar = Depends(get_calendar),
) -> BookingResponse:
    """Create a booking on one of the tenant's units.

    Validates that:
    - The stay covers at least one night and does not start in the past.
    - No PENDING, CONFIRMED or CHECKED_IN booking holds any of its nights.
    """
    booking = await booking_service.create_booking(
        db,
        ctx,
        unit_id=body.unit_id,
        guest_id=body.guest_id,
        stay=body.stay,
        now=clock.now(),
        calendar=calendar,
        total_override=to_money(body.total_amount),
        status=body.status,
        guest_name=body.guest_name,
        special_requests=body.special_requests,
    )
    return BookingResponse.from_booking(booking)


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List bookings",
)
async def list_bookings(
    unit_id: uuid.UUID | None = Query(None, description="Filter by unit"),
    status_filter: BookingStatus | None = Query(None, alias="status", description="Filter by booking status"),
    payment_status: list[PaymentStatus] | None = Query(
        None, description="Filter by derived payment status; repeat for several (UNPAID and PARTPAID)"
    ),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> BookingListResponse:
    items, total = await booking_service.list_bookings(
        db,
        ctx,
        unit_id=unit_id,
        status=status_filter,
        payment_statuses=payment_status,
        skip=skip,
        limit=limit,
    )
    return BookingListResponse(items=[BookingResponse.from_booking(b) for b in items], total=total)


@router.get(
    "/in-house",
    response_model=list[BookingResponse],
    summary="Guests currently checked in",
)
async def list_in_house(
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> list[BookingResponse]:
    return [BookingResponse.from_booking(b) for b in await booking_service.list_in_house(db, ctx)]


@router.get(
    "/arrivals/today",
    response_model=list[BookingResponse],
    summary="Bookings due to arrive today",
)
async def list_arrivals_today(
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
    calendar: OperatingCalendar = Depends(get_calendar),
) -> list[BookingResponse]:
    arrivals = await booking_service.list_arrivals(db, ctx, calendar.today(clock.now()))
    return [BookingResponse.from_booking(b) for b in arrivals]


@router.get(
    "/arrivals/week",
    response_model=list[BookingResponse],
    summary="Bookings due to arrive in the next seven days, today included",
)
async def list_arrivals_week(
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
    calendar: OperatingCalendar = Depends(get_calendar),
) -> list[BookingResponse]:
    arrivals = await booking_service.list_arrivals(db, ctx, calendar.today(clock.now()), days=7)
    return [BookingResponse.from_booking(b) for b in arrivals]


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> BookingResponse:
    return BookingResponse.from_booking(await booking_service.get_booking(db, ctx, booking_id))


# ---------------------------------------------------------------------------
# Status moves
# ---------------------------------------------------------------------------


async def _move(
    booking_id: uuid.UUID,
    target: BookingStatus,
    db: AsyncSession,
    ctx: ActorContext,
    clock: Clock,
) -> BookingResponse:
    booking = await booking_service.transition_booking(db, ctx, booking_id, target, clock.now())
    return BookingResponse.from_booking(booking)


@router.post(
    "/{booking_id}/confirm",
    response_model=BookingResponse,
    summary="Confirm a pending booking",
)
async def confirm_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
) -> BookingResponse:
    return await _move(booking_id, BookingStatus.CONFIRMED, db, ctx, clock)


@router.post(
    "/{booking_id}/check-in",
    response_model=BookingResponse,
    summary="Check the guest in",
)
async def check_in_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
) -> BookingResponse:
    return await _move(booking_id, BookingStatus.CHECKED_IN, db, ctx, clock)


@router.post(
    "/{booking_id}/cancel",
    response_model=BookingResponse,
    summary="Cancel a booking and free its nights",
)
async def cancel_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
) -> BookingResponse:
    return await _move(booking_id, BookingStatus.CANCELLED, db, ctx, clock)
