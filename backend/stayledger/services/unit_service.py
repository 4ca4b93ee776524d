"""Unit catalog service: the minimum the pricing engine needs to look up."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stayledger.core.money import Money
from stayledger.core.records import ActorContext, Promotion
from stayledger.models.unit import Unit
from stayledger.services.booking_service import get_unit
from stayledger.services.snapshots import store_promotion

logger = logging.getLogger(__name__)


async def create_unit(
    db: AsyncSession,
    ctx: ActorContext,
    *,
    name: str,
    base_price: Money,
    currency: str,
    capacity: int = 1,
    unit_type: str = "ROOM",
    property_name: str | None = None,
) -> Unit:
    unit = Unit(
        tenant_id=ctx.tenant_id,
        name=name,
        base_price_minor=base_price.minor,
        currency=currency,
        capacity=capacity,
        unit_type=unit_type,
        property_name=property_name,
        bookings=[],
    )
    db.add(unit)
    await db.flush()
    await db.refresh(unit)
    logger.info("Created unit %s (%s) at %s/night for tenant %s", unit.id, name, base_price, ctx.tenant_id)
    return unit


async def list_units(db: AsyncSession, ctx: ActorContext, skip: int = 0, limit: int = 50) -> tuple[list[Unit], int]:
    total_result = await db.execute(select(func.count()).select_from(Unit).where(Unit.tenant_id == ctx.tenant_id))
    result = await db.execute(
        select(Unit).where(Unit.tenant_id == ctx.tenant_id).order_by(Unit.name).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total_result.scalar_one()


async def set_promotion(db: AsyncSession, ctx: ActorContext, unit_id, promotion: Promotion) -> Unit:
    """Replace the unit's promotional rate. Only one promotion exists per unit."""
    promotion.validate()
    unit = await get_unit(db, ctx, unit_id)
    store_promotion(unit, promotion)
    await db.flush()
    await db.refresh(unit)
    logger.info(
        "Unit %s promotion set: %s %s from %s to %s by %s",
        unit.id,
        promotion.kind.value,
        promotion.value,
        promotion.start_date,
        promotion.end_date,
        ctx.label,
    )
    return unit


async def clear_promotion(db: AsyncSession, ctx: ActorContext, unit_id) -> Unit:
    unit = await get_unit(db, ctx, unit_id)
    unit.clear_promotion()
    await db.flush()
    await db.refresh(unit)
    logger.info("Unit %s promotion cleared by %s", unit.id, ctx.label)
    return unit
