"""Tenant-wide payments router: every payment taken, and who still owes."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from stayledger.api.deps import get_actor, get_db
from stayledger.core.money import Money
from stayledger.core.records import ActorContext
from stayledger.schemas.common import ERROR_RESPONSES
from stayledger.schemas.payment import (
    PendingBalanceListResponse,
    PendingBalanceResponse,
    TenantPaymentListResponse,
    TenantPaymentResponse,
)
from stayledger.services import booking_service, ledger_service

router = APIRouter(prefix="/api/v1/payments", tags=["payments"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=TenantPaymentListResponse,
    summary="List payments across all bookings",
)
async def list_tenant_payments(
    unit_id: uuid.UUID | None = Query(None, description="Filter by unit"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, ge=1, le=200, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> TenantPaymentListResponse:
    """Newest payment first, each with its unit, guest and booking status."""
    rows, total = await ledger_service.list_tenant_payments(db, ctx, unit_id=unit_id, skip=skip, limit=limit)
    return TenantPaymentListResponse(
        items=[TenantPaymentResponse.from_rows(payment, booking) for payment, booking in rows],
        total=total,
    )


@router.get(
    "/pending",
    response_model=PendingBalanceListResponse,
    summary="Bookings that still owe money",
)
async def list_pending_balances(
    db: AsyncSession = Depends(get_db),
    ctx: ActorContext = Depends(get_actor),
) -> PendingBalanceListResponse:
    """UNPAID and PARTPAID bookings that are not cancelled or checked out, soonest arrival first."""
    pending = await booking_service.list_pending_balances(db, ctx)
    owed = Money(sum(ledger.outstanding().minor for _, ledger in pending))
    return PendingBalanceListResponse(
        items=[PendingBalanceResponse.build(booking, ledger) for booking, ledger in pending],
        total_outstanding=owed.to_decimal(),
    )
