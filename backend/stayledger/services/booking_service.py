"""Booking service: catalog and reservation lookups, booking creation, status moves."""

import logging
import uuid
from collections.abc import Collection
from datetime import date, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stayledger.config import settings
from stayledger.core import availability, lifecycle
from stayledger.core.clock import OperatingCalendar
from stayledger.core.enums import BLOCKING_STATUSES, BookingStatus, PaymentStatus
from stayledger.core.errors import BookingConflictError, InvalidTransitionError, NotFoundError
from stayledger.core.ledger import PaymentLedger
from stayledger.core.money import Money
from stayledger.core.pricing import StayQuote, apply_total_override, price_stay
from stayledger.core.records import ActorContext, BookingSnapshot, DateRange
from stayledger.models.booking import Booking
from stayledger.models.unit import Unit
from stayledger.services.locking import booking_locks, serialized, unit_locks
from stayledger.services.snapshots import booking_snapshot, build_ledger, unit_rate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def get_unit(db: AsyncSession, ctx: ActorContext, unit_id: uuid.UUID, *, for_update: bool = False) -> Unit:
    """Fetch a unit owned by the caller's tenant or raise ``NotFoundError``."""
    query = select(Unit).where(Unit.id == unit_id, Unit.tenant_id == ctx.tenant_id)
    if for_update and not settings.is_sqlite:
        query = query.with_for_update()
    result = await db.execute(query.execution_options(populate_existing=True))
    unit = result.scalar_one_or_none()
    if unit is None:
        raise NotFoundError("Unit not found")
    return unit


async def get_booking(
    db: AsyncSession,
    ctx: ActorContext,
    booking_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> Booking:
    """Fetch a booking owned by the caller's tenant or raise ``NotFoundError``.

    ``for_update`` takes a row lock (PostgreSQL) and always re-reads the row
    and its payments/charges, bypassing anything cached in the session.
    """
    query = select(Booking).where(Booking.id == booking_id, Booking.tenant_id == ctx.tenant_id)
    if for_update and not settings.is_sqlite:
        query = query.with_for_update()
    result = await db.execute(query.execution_options(populate_existing=True))
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


async def list_blocking_bookings(
    db: AsyncSession,
    unit_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> list[BookingSnapshot]:
    """Reservations on ``unit_id`` that still hold nights."""
    query = select(Booking).where(
        Booking.unit_id == unit_id,
        Booking.status.in_([s.value for s in BLOCKING_STATUSES]),
    )
    if for_update and not settings.is_sqlite:
        query = query.with_for_update()
    result = await db.execute(query)
    return [booking_snapshot(b) for b in result.scalars().all()]


# ---------------------------------------------------------------------------
# Availability and pricing
# ---------------------------------------------------------------------------


async def check_availability(
    db: AsyncSession,
    ctx: ActorContext,
    unit_id: uuid.UUID,
    stay: DateRange,
    now: datetime,
    calendar: OperatingCalendar,
) -> bool:
    await get_unit(db, ctx, unit_id)
    existing = await list_blocking_bookings(db, unit_id)
    return availability.is_bookable(unit_id, stay, existing, today=calendar.today(now))


async def blocked_calendar(
    db: AsyncSession,
    ctx: ActorContext,
    unit_id: uuid.UUID,
    window: DateRange,
) -> list[date]:
    await get_unit(db, ctx, unit_id)
    existing = await list_blocking_bookings(db, unit_id)
    return availability.blocked_dates(unit_id, window, existing)


async def quote_stay(
    db: AsyncSession,
    ctx: ActorContext,
    unit_id: uuid.UUID,
    stay: DateRange,
    total_override: Money | None = None,
) -> StayQuote:
    unit = await get_unit(db, ctx, unit_id)
    return apply_total_override(price_stay(unit_rate(unit), stay), total_override)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def create_booking(
    db: AsyncSession,
    ctx: ActorContext,
    *,
    unit_id: uuid.UUID,
    guest_id: uuid.UUID,
    stay: DateRange,
    now: datetime,
    calendar: OperatingCalendar,
    total_override: Money | None = None,
    status: BookingStatus = BookingStatus.PENDING,
    guest_name: str | None = None,
    special_requests: str | None = None,
) -> Booking:
    """Create a booking once the unit is free for ``stay``.

    Serialized per unit so two desks cannot sell the same night.
    """
    if status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
        raise InvalidTransitionError("NEW", status.value)

    async with serialized(db, unit_locks, unit_id):
        unit = await get_unit(db, ctx, unit_id, for_update=True)
        existing = await list_blocking_bookings(db, unit_id, for_update=True)
        try:
            availability.ensure_bookable(unit_id, stay, existing, today=calendar.today(now))
        except BookingConflictError as e:
            logger.warning(
                "Booking refused on unit %s for %s..%s: conflicts with %s",
                unit_id,
                stay.check_in,
                stay.check_out,
                ", ".join(str(i) for i in e.conflicting_ids),
            )
            raise

        quote = apply_total_override(price_stay(unit_rate(unit), stay), total_override)
        booking = Booking(
            tenant_id=ctx.tenant_id,
            unit_id=unit.id,
            guest_id=guest_id,
            guest_name=guest_name,
            check_in=stay.check_in,
            check_out=stay.check_out,
            status=status.value,
            currency=unit.currency,
            nightly_rate_minor=quote.nightly_rate.minor,
            computed_total_minor=quote.computed_total.minor,
            total_amount_minor=quote.total.minor,
            promotion_label=quote.promotion_label,
            special_requests=special_requests,
            created_by=ctx.label,
            payments=[],
            charges=[],
        )
        db.add(booking)
        await db.flush()
        await db.refresh(booking)

    logger.info(
        "Created booking %s on unit %s for %s night(s), total=%s (computed=%s) by %s",
        booking.id,
        unit_id,
        quote.nights,
        quote.total,
        quote.computed_total,
        ctx.label,
    )
    return booking


async def transition_booking(
    db: AsyncSession,
    ctx: ActorContext,
    booking_id: uuid.UUID,
    target: BookingStatus,
    now: datetime,
) -> Booking:
    """Move a booking forward: confirm, check in or cancel."""
    async with serialized(db, booking_locks, booking_id):
        booking = await get_booking(db, ctx, booking_id, for_update=True)
        current = BookingStatus(booking.status)
        lifecycle.ensure_transition(current, target)

        booking.status = target.value
        if target is BookingStatus.CHECKED_IN:
            booking.checked_in_at = now
        elif target is BookingStatus.CANCELLED:
            booking.cancelled_at = now
        await db.flush()
        await db.refresh(booking)

    logger.info("Booking %s moved %s -> %s by %s", booking_id, current.value, target.value, ctx.label)
    return booking


async def list_bookings(
    db: AsyncSession,
    ctx: ActorContext,
    *,
    unit_id: uuid.UUID | None = None,
    status: BookingStatus | None = None,
    payment_statuses: Collection[PaymentStatus] | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Booking], int]:
    """Paginated bookings for the tenant, newest first.

    Payment status is derived, not stored, so that filter runs after the
    query. Several statuses may be given (e.g. UNPAID and PARTPAID).
    """
    query = select(Booking).where(Booking.tenant_id == ctx.tenant_id)
    if unit_id is not None:
        query = query.where(Booking.unit_id == unit_id)
    if status is not None:
        query = query.where(Booking.status == status.value)
    query = query.order_by(Booking.created_at.desc(), Booking.check_in.desc())

    if not payment_statuses:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await db.execute(count_query)).scalar_one()
        result = await db.execute(query.offset(skip).limit(limit))
        return list(result.scalars().all()), total

    wanted = set(payment_statuses)
    result = await db.execute(query)
    matching = [b for b in result.scalars().all() if build_ledger(b).payment_status() in wanted]
    return matching[skip : skip + limit], len(matching)


async def list_pending_balances(db: AsyncSession, ctx: ActorContext) -> list[tuple[Booking, PaymentLedger]]:
    """Live bookings that still owe money, soonest arrival first.

    Cancelled and checked-out stays are left out; checkout settles the bill.
    """
    result = await db.execute(
        select(Booking)
        .where(
            Booking.tenant_id == ctx.tenant_id,
            Booking.status.in_([s.value for s in BLOCKING_STATUSES]),
        )
        .order_by(Booking.check_in, Booking.created_at)
    )
    pending = []
    for booking in result.scalars().all():
        ledger = build_ledger(booking)
        if ledger.payment_status() in (PaymentStatus.UNPAID, PaymentStatus.PARTPAID):
            pending.append((booking, ledger))
    return pending


async def list_in_house(db: AsyncSession, ctx: ActorContext) -> list[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.tenant_id == ctx.tenant_id, Booking.status == BookingStatus.CHECKED_IN.value)
        .order_by(Booking.check_out)
    )
    return list(result.scalars().all())


async def list_arrivals(db: AsyncSession, ctx: ActorContext, first_day: date, days: int = 1) -> list[Booking]:
    """Bookings due to arrive in ``[first_day, first_day + days)`` not yet checked in or cancelled."""
    result = await db.execute(
        select(Booking)
        .where(
            Booking.tenant_id == ctx.tenant_id,
            Booking.check_in >= first_day,
            Booking.check_in < first_day + timedelta(days=days),
            Booking.status.in_([BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value]),
        )
        .order_by(Booking.check_in, Booking.created_at)
    )
    return list(result.scalars().all())
