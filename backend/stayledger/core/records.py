"""Immutable engine-side records.

The engine never talks to the database; the service layer turns ORM rows
into these snapshots (see ``stayledger.services.snapshots``) and persists
whatever new ``Payment``/``Charge`` records the engine hands back.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal

from stayledger.core.enums import BookingStatus, ChargeKind, PromotionKind
from stayledger.core.errors import InvalidPromotionError
from stayledger.core.money import Money


@dataclass(frozen=True)
class ActorContext:
    """Who is acting, for which tenant. Passed explicitly into every service call."""

    tenant_id: uuid.UUID
    role: str = "staff"
    actor_id: str | None = None

    @property
    def label(self) -> str:
        return f"{self.role}:{self.actor_id}" if self.actor_id else self.role


@dataclass(frozen=True)
class DateRange:
    """A stay ``[check_in, check_out)`` in calendar dates."""

    check_in: date
    check_out: date

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def last_night(self) -> date:
        return self.check_out - timedelta(days=1)

    def days(self):
        """Yield every night of the stay."""
        current = self.check_in
        while current < self.check_out:
            yield current
            current += timedelta(days=1)


@dataclass(frozen=True)
class Promotion:
    """A time-bounded promotional rate. ``start_date``/``end_date`` are inclusive."""

    kind: PromotionKind
    value: Decimal
    start_date: date
    end_date: date
    label: str = ""
    active: bool = True

    def validate(self) -> None:
        if self.start_date > self.end_date:
            raise InvalidPromotionError("Promotion start_date must not be after end_date")
        if self.kind is PromotionKind.PERCENT_OFF and not (Decimal(0) < self.value <= Decimal(100)):
            raise InvalidPromotionError("Percent-off promotions must be greater than 0 and at most 100")
        if self.kind is PromotionKind.FIXED_NIGHTLY and self.value <= 0:
            raise InvalidPromotionError("Fixed nightly promotions must be greater than 0")

    def overlaps(self, stay: DateRange) -> bool:
        """True when any night of ``stay`` falls inside the promotion window."""
        return self.start_date <= stay.last_night and self.end_date >= stay.check_in


@dataclass(frozen=True)
class UnitRate:
    """The catalog facts pricing needs about a unit."""

    unit_id: uuid.UUID
    base_price: Money
    promotion: Promotion | None = None
    currency: str = "NGN"


@dataclass(frozen=True)
class BookingSnapshot:
    id: uuid.UUID
    unit_id: uuid.UUID
    check_in: date
    check_out: date
    status: BookingStatus
    total_amount: Money
    nightly_rate: Money = field(default_factory=Money.zero)
    currency: str = "NGN"

    @property
    def stay(self) -> DateRange:
        return DateRange(self.check_in, self.check_out)

    @property
    def nights(self) -> int:
        return self.stay.nights


@dataclass(frozen=True)
class Payment:
    booking_id: uuid.UUID
    amount: Money
    reference: str
    created_at: datetime
    notes: str | None = None
    recorded_by: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class Charge:
    booking_id: uuid.UUID
    kind: ChargeKind
    amount: Money
    posted_at: datetime
    notes: str | None = None
    posted_by: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
