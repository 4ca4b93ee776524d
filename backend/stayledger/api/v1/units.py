"""Units API router: catalog, promotional rates, availability and calendar."""

from __future__ import annotations

import uuid
from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from stayledger.api.deps import get_actor, get_calendar, get_clock, get_db
from stayledger.config import settings
from stayledger.core.clock import Clock, OperatingCalendar
from stayledger.core.money import Money
from stayledger.core.records import ActorContext, DateRange
from stayledger.schemas.common import ERROR_RESPONSES
from stayledger.schemas.unit import (
    AvailabilityResponse,
    CalendarResponse,
    PromotionSet,
    UnitCreate,
    UnitListResponse,
    UnitResponse,
)
from stayledger.services import booking_service, unit_service

router = APIRouter(prefix="/api/v1/units", tags=["units"], responses=ERROR_RESPONSES)


@router.post(
    "",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a unit to the catalog",
)
async def create_unit(
    body: UnitCreate,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> UnitResponse:
    unit = await unit_service.create_unit(
        db,
        ctx,
        name=body.name,
        base_price=Money.from_decimal(body.base_price),
        currency=(body.currency or settings.default_currency).upper(),
        capacity=body.capacity,
        unit_type=body.unit_type,
        property_name=body.property_name,
    )
    return UnitResponse.from_unit(unit)


@router.get(
    "",
    response_model=UnitListResponse,
    summary="List the tenant's units",
)
async def list_units(
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, ge=1, le=200, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> UnitListResponse:
    items, total = await unit_service.list_units(db, ctx, skip=skip, limit=limit)
    return UnitListResponse(items=[UnitResponse.from_unit(u) for u in items], total=total)


@router.get(
    "/{unit_id}",
    response_model=UnitResponse,
    summary="Get a unit",
)
async def get_unit(
    unit_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> UnitResponse:
    return UnitResponse.from_unit(await booking_service.get_unit(db, ctx, unit_id))


@router.put(
    "/{unit_id}/promotion",
    response_model=UnitResponse,
    summary="Set the unit's promotional rate",
)
async def set_promotion(
    unit_id: uuid.UUID,
    body: PromotionSet,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> UnitResponse:
    """Replace any existing promotion. Existing bookings keep their committed totals."""
    unit = await unit_service.set_promotion(db, ctx, unit_id, body.to_promotion())
    return UnitResponse.from_unit(unit)


@router.delete(
    "/{unit_id}/promotion",
    response_model=UnitResponse,
    summary="Remove the unit's promotional rate",
)
async def clear_promotion(
    unit_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> UnitResponse:
    return UnitResponse.from_unit(await unit_service.clear_promotion(db, ctx, unit_id))


@router.get(
    "/{unit_id}/availability",
    response_model=AvailabilityResponse,
    summary="Check whether a stay can be booked",
)
async def check_availability(
    unit_id: uuid.UUID,
    check_in: date = Query(..., description="First night"),
    check_out: date = Query(..., description="Departure day (not a night)"),
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
    calendar: OperatingCalendar = Depends(get_calendar),
) -> AvailabilityResponse:
    stay = DateRange(check_in, check_out)
    available = await booking_service.check_availability(db, ctx, unit_id, stay, clock.now(), calendar)
    return AvailabilityResponse(
        unit_id=unit_id,
        check_in=check_in,
        check_out=check_out,
        nights=stay.nights,
        available=available,
    )


@router.get(
    "/{unit_id}/calendar",
    response_model=CalendarResponse,
    summary="Blocked nights for calendar rendering",
)
async def get_calendar_view(
    unit_id: uuid.UUID,
    start: date | None = Query(None, description="First day shown; defaults to today"),
    days: int = Query(30, ge=1, le=366, description="Number of days shown"),
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
    clock: Clock = Depends(get_clock),
    calendar: OperatingCalendar = Depends(get_calendar),
) -> CalendarResponse:
    first = start or calendar.today(clock.now())
    window = DateRange(first, first + timedelta(days=days))
    blocked = await booking_service.blocked_calendar(db, ctx, unit_id, window)
    return CalendarResponse(unit_id=unit_id, start=window.check_in, end=window.check_out, blocked_dates=blocked)
