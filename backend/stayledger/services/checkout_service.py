"""Checkout service: preview and commit a guest's departure."""

import logging
import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from stayledger.config import settings
from stayledger.core import checkout
from stayledger.core.checkout import CheckoutPreview, CheckoutRequest, CheckoutSettlement
from stayledger.core.clock import OperatingCalendar
from stayledger.core.errors import OutstandingBalanceError
from stayledger.core.records import ActorContext
from stayledger.services.booking_service import get_booking
from stayledger.services.locking import booking_locks, serialized
from stayledger.services.snapshots import build_ledger, charge_row, refund_row

logger = logging.getLogger(__name__)


async def preview(
    db: AsyncSession,
    ctx: ActorContext,
    booking_id: uuid.UUID,
    now: datetime,
    calendar: OperatingCalendar,
) -> CheckoutPreview:
    booking = await get_booking(db, ctx, booking_id)
    return checkout.preview_checkout(build_ledger(booking), now, calendar, settings.default_refund_policy)


async def complete_checkout(
    db: AsyncSession,
    ctx: ActorContext,
    booking_id: uuid.UUID,
    request: CheckoutRequest,
    now: datetime,
    calendar: OperatingCalendar,
) -> CheckoutSettlement:
    """Check a guest out.

    Form charges, the refund record and the status change are written in one
    transaction under the booking lock. A rejected checkout writes nothing.
    Only an approved refund is recorded; an unapproved decision is returned
    to the caller and discarded.
    """
    async with serialized(db, booking_locks, booking_id):
        booking = await get_booking(db, ctx, booking_id, for_update=True)
        ledger = build_ledger(booking)
        try:
            settlement = checkout.complete_checkout(ledger, request, now, calendar, settings.default_refund_policy)
        except OutstandingBalanceError as e:
            logger.warning(
                "Checkout of booking %s blocked by %s: %s (outstanding %s)",
                booking_id,
                ctx.label,
                e.message,
                e.outstanding,
            )
            raise

        for charge in settlement.new_charges:
            booking.charges.append(charge_row(charge))
        if settlement.refund is not None and settlement.refund.approved:
            booking.refund = refund_row(booking, settlement.refund, ctx.label, now)
        booking.status = settlement.status.value
        booking.checked_out_at = settlement.checked_out_at
        booking.checkout_notes = settlement.notes
        await db.flush()
        await db.refresh(booking)

    refund = settlement.refund
    logger.info(
        "Checked out booking %s by %s: %d new charge(s), overstay %d day(s), refund %s",
        booking_id,
        ctx.label,
        len(settlement.new_charges),
        settlement.overstay_days,
        refund.refund_amount if refund is not None and refund.approved else "none",
    )
    if refund is not None and refund.overridden:
        logger.warning(
            "Refund on booking %s overridden from %s to %s by %s: %s",
            booking_id,
            refund.suggested_amount,
            refund.refund_amount,
            ctx.label,
            refund.reason,
        )
    return settlement
