"""Pydantic v2 request/response schemas for unit endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from stayledger.core.enums import PromotionKind
from stayledger.core.money import Money
from stayledger.core.records import Promotion
from stayledger.models.unit import Unit
from stayledger.schemas.common import MoneyInput
from stayledger.services.snapshots import promotion_of

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class UnitCreate(BaseModel):
    """Schema for adding a room or apartment to the catalog."""

    name: str = Field(..., min_length=1, max_length=255)
    base_price: MoneyInput = Field(..., gt=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    capacity: int = Field(1, ge=1)
    unit_type: str = Field("ROOM", pattern="^(ROOM|APARTMENT)$")
    property_name: str | None = Field(None, max_length=255)


class PromotionSet(BaseModel):
    """Schema for replacing a unit's promotional rate.

    ``value`` is a percentage for ``PERCENT_OFF`` and a nightly amount for
    ``FIXED_NIGHTLY``.
    """

    kind: PromotionKind
    value: Decimal = Field(..., gt=0, decimal_places=2)
    start_date: date
    end_date: date
    label: str = Field("", max_length=255)
    active: bool = True

    @model_validator(mode="after")
    def check_dates(self) -> "PromotionSet":
        """Validate that the promotion window is not inverted."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def to_promotion(self) -> Promotion:
        return Promotion(
            kind=self.kind,
            value=self.value,
            start_date=self.start_date,
            end_date=self.end_date,
            label=self.label,
            active=self.active,
        )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PromotionResponse(BaseModel):
    kind: PromotionKind
    value: Decimal
    start_date: date
    end_date: date
    label: str
    active: bool


class UnitResponse(BaseModel):
    """Standard unit response."""

    id: uuid.UUID
    name: str
    property_name: str | None = None
    unit_type: str
    capacity: int
    base_price: Decimal
    currency: str
    promotion: PromotionResponse | None = None
    created_at: datetime | None = None

    @classmethod
    def from_unit(cls, unit: Unit) -> "UnitResponse":
        promo = promotion_of(unit)
        return cls(
            id=unit.id,
            name=unit.name,
            property_name=unit.property_name,
            unit_type=unit.unit_type,
            capacity=unit.capacity,
            base_price=Money(unit.base_price_minor).to_decimal(),
            currency=unit.currency,
            promotion=PromotionResponse(**promo.__dict__) if promo else None,
            created_at=unit.created_at,
        )


class UnitListResponse(BaseModel):
    """Paginated list of units."""

    items: list[UnitResponse]
    total: int


class AvailabilityResponse(BaseModel):
    unit_id: uuid.UUID
    check_in: date
    check_out: date
    nights: int
    available: bool


class CalendarResponse(BaseModel):
    """Nights held by PENDING, CONFIRMED or CHECKED_IN bookings inside ``[start, end)``."""

    unit_id: uuid.UUID
    start: date
    end: date
    blocked_dates: list[date]
