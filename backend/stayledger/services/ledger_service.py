"""Ledger service: payments and charges, one booking at a time."""

import logging
import uuid
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stayledger.core import checkout
from stayledger.core.clock import OperatingCalendar
from stayledger.core.ledger import PaymentLedger
from stayledger.core.money import Money
from stayledger.core.records import ActorContext
from stayledger.models.booking import Booking
from stayledger.models.charge import Charge
from stayledger.models.payment import Payment
from stayledger.services.booking_service import get_booking
from stayledger.services.locking import booking_locks, serialized
from stayledger.services.snapshots import build_ledger, charge_row, payment_row

logger = logging.getLogger(__name__)


async def get_ledger(db: AsyncSession, ctx: ActorContext, booking_id: uuid.UUID) -> tuple[Booking, PaymentLedger]:
    booking = await get_booking(db, ctx, booking_id)
    return booking, build_ledger(booking)


async def list_tenant_payments(
    db: AsyncSession,
    ctx: ActorContext,
    *,
    unit_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[tuple[Payment, Booking]], int]:
    """Every payment taken by the tenant, newest first, with the booking it settles."""
    conditions = [Booking.tenant_id == ctx.tenant_id]
    if unit_id is not None:
        conditions.append(Booking.unit_id == unit_id)

    count_query = select(func.count(Payment.id)).join(Booking, Payment.booking_id == Booking.id).where(*conditions)
    total = (await db.execute(count_query)).scalar_one()
    result = await db.execute(
        select(Payment, Booking)
        .join(Booking, Payment.booking_id == Booking.id)
        .where(*conditions)
        .order_by(Payment.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return [(payment, booking) for payment, booking in result.all()], total


async def record_payment(
    db: AsyncSession,
    ctx: ActorContext,
    booking_id: uuid.UUID,
    *,
    amount: Money,
    reference: str,
    now: datetime,
    notes: str | None = None,
) -> tuple[Payment, PaymentLedger]:
    """Append a payment and return it with the updated ledger."""
    async with serialized(db, booking_locks, booking_id):
        booking = await get_booking(db, ctx, booking_id, for_update=True)
        ledger = build_ledger(booking)
        payment = ledger.record_payment(amount, reference, now, notes=notes, recorded_by=ctx.label)

        row = payment_row(payment, booking.currency)
        booking.payments.append(row)
        await db.flush()

    logger.info(
        "Recorded payment %s of %s on booking %s (ref=%s); outstanding now %s [%s] by %s",
        row.id,
        amount,
        booking_id,
        payment.reference,
        ledger.outstanding(),
        ledger.payment_status().value,
        ctx.label,
    )
    return row, ledger


async def post_damage_charge(
    db: AsyncSession,
    ctx: ActorContext,
    booking_id: uuid.UUID,
    *,
    amount: Money,
    now: datetime,
    notes: str | None = None,
) -> tuple[Charge, PaymentLedger]:
    """Post a damage charge on an in-house booking.

    This completes on its own; the resulting balance blocks checkout until paid.
    """
    async with serialized(db, booking_locks, booking_id):
        booking = await get_booking(db, ctx, booking_id, for_update=True)
        ledger = build_ledger(booking)
        charge = checkout.add_damage_charge(ledger, amount, now, notes=notes, posted_by=ctx.label)

        row = charge_row(charge)
        booking.charges.append(row)
        await db.flush()

    logger.info(
        "Posted damage charge %s of %s on booking %s; outstanding now %s by %s",
        row.id,
        amount,
        booking_id,
        ledger.outstanding(),
        ctx.label,
    )
    return row, ledger


async def post_overstay_charge(
    db: AsyncSession,
    ctx: ActorContext,
    booking_id: uuid.UUID,
    *,
    amount: Money,
    now: datetime,
    calendar: OperatingCalendar,
    notes: str | None = None,
) -> tuple[Charge, PaymentLedger]:
    """Post a staff-confirmed overstay charge on a booking past its checkout time."""
    async with serialized(db, booking_locks, booking_id):
        booking = await get_booking(db, ctx, booking_id, for_update=True)
        ledger = build_ledger(booking)
        suggested = checkout.suggested_overstay_charge(ledger.booking, now, calendar)
        charge = checkout.add_overstay_charge(ledger, amount, now, calendar, notes=notes, posted_by=ctx.label)

        row = charge_row(charge)
        booking.charges.append(row)
        await db.flush()

    logger.info(
        "Posted overstay charge %s of %s (suggested %s) on booking %s by %s",
        row.id,
        amount,
        suggested,
        booking_id,
        ctx.label,
    )
    return row, ledger
