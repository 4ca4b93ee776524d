"""Shared API dependencies: single import point for all routers.

Authentication lives in front of this service; the gateway forwards the
tenant and the acting staff member as headers::

    X-Tenant-ID: <uuid>      required
    X-Actor-Role: manager    optional, defaults to "staff"
    X-Actor-ID: ada          optional
"""

import uuid

from fastapi import Header, HTTPException, status

from stayledger.config import settings
from stayledger.core.clock import Clock, OperatingCalendar, SystemClock
from stayledger.core.records import ActorContext
from stayledger.database import get_db

_system_clock = SystemClock()


async def get_actor(
    x_tenant_id: str | None = Header(None),
    x_actor_role: str = Header("staff"),
    x_actor_id: str | None = Header(None),
) -> ActorContext:
    """Build the caller's context from the forwarded headers.

    Raises:
        HTTPException 400: If the tenant header is missing or not a UUID.
    """
    if not x_tenant_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="X-Tenant-ID header is required")
    try:
        tenant_id = uuid.UUID(x_tenant_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID must be a UUID",
        ) from None
    return ActorContext(tenant_id=tenant_id, role=x_actor_role.strip() or "staff", actor_id=x_actor_id or None)


def get_clock() -> Clock:
    """Overridden in tests with a ``FixedClock``."""
    return _system_clock


def get_calendar() -> OperatingCalendar:
    return settings.operating_calendar


__all__ = [
    "get_db",
    "get_actor",
    "get_clock",
    "get_calendar",
]
