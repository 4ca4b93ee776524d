"""Stay pricing: one effective nightly rate per stay, optional promotion, manual override."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from fractions import Fraction

from stayledger.core.enums import PromotionKind
from stayledger.core.errors import InvalidAmountError, ZeroNightsError
from stayledger.core.money import Money
from stayledger.core.records import DateRange, Promotion, UnitRate


@dataclass(frozen=True)
class StayQuote:
    """Price of a stay.

    ``computed_total`` is always the engine's figure; ``total`` differs from
    it only after ``apply_total_override``.
    """

    nights: int
    nightly_rate: Money
    total: Money
    computed_total: Money
    base_price: Money
    promotion_label: str | None = None

    @property
    def discount(self) -> Money:
        """``computed_total - total``; negative when staff charged more."""
        return self.computed_total - self.total

    @property
    def is_overridden(self) -> bool:
        return self.total != self.computed_total


def promotional_rate(base_price: Money, promotion: Promotion) -> Money:
    if promotion.kind is PromotionKind.PERCENT_OFF:
        return base_price.scale(1 - Fraction(Decimal(promotion.value)) / 100)
    return Money.from_decimal(promotion.value)


def resolve_nightly_rate(unit: UnitRate, stay: DateRange) -> tuple[Money, Promotion | None]:
    """The rate for the whole stay and the promotion that produced it, if any."""
    promotion = unit.promotion
    if promotion is not None and promotion.active and promotion.overlaps(stay):
        return promotional_rate(unit.base_price, promotion), promotion
    return unit.base_price, None


def price_stay(unit: UnitRate, stay: DateRange) -> StayQuote:
    nights = stay.nights
    if nights < 1:
        raise ZeroNightsError("A stay must cover at least one night")

    nightly_rate, promotion = resolve_nightly_rate(unit, stay)
    total = nightly_rate * nights
    return StayQuote(
        nights=nights,
        nightly_rate=nightly_rate,
        total=total,
        computed_total=total,
        base_price=unit.base_price,
        promotion_label=(promotion.label or promotion.kind.value) if promotion else None,
    )


def apply_total_override(quote: StayQuote, override: Money | None) -> StayQuote:
    """Replace the committed total with a staff-entered figure."""
    if override is None:
        return quote
    if not override.is_positive():
        raise InvalidAmountError("Total amount must be greater than 0")
    return replace(quote, total=override)
