"""Exact currency arithmetic in integer minor units (kobo, cents).

Totals that feed the checkout certification gate must never go through
binary floating point, so every amount is held as an ``int`` count of minor
units and rounded half-up only when a rational factor is applied.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from fractions import Fraction

from stayledger.core.errors import MoneyParseError

MINOR_UNITS = 100
_TWO_PLACES = Decimal("0.01")
_NON_NUMERIC = re.compile(r"[^0-9.]")


def _round_half_up(value: Fraction) -> int:
    """Round a rational number of minor units to the nearest integer, ties away from zero."""
    sign = -1 if value < 0 else 1
    magnitude = abs(value)
    whole, remainder = divmod(magnitude.numerator, magnitude.denominator)
    if remainder * 2 >= magnitude.denominator:
        whole += 1
    return sign * whole


@dataclass(frozen=True, order=True)
class Money:
    """An amount of money stored as integer minor units."""

    minor: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.minor, int) or isinstance(self.minor, bool):
            raise TypeError(f"Money.minor must be int, got {type(self.minor).__name__}")

    # -- constructors -------------------------------------------------------

    @classmethod
    def zero(cls) -> Money:
        return cls(0)

    @classmethod
    def from_decimal(cls, value: Decimal | int | str) -> Money:
        """Build from a decimal major-unit amount, rounding half-up to two places."""
        try:
            quantized = Decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError) as exc:
            raise MoneyParseError(value) from exc
        if not quantized.is_finite():
            raise MoneyParseError(value)
        return cls(int(quantized * MINOR_UNITS))

    @classmethod
    def major(cls, amount: int) -> Money:
        """Shortcut for whole major units: ``Money.major(50_000)`` is 50,000.00."""
        return cls(amount * MINOR_UNITS)

    # -- arithmetic ---------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.minor + other.minor)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.minor - other.minor)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int) or isinstance(factor, bool):
            return NotImplemented
        return Money(self.minor * factor)

    __rmul__ = __mul__

    def __neg__(self) -> Money:
        return Money(-self.minor)

    def scale(self, factor: Fraction | Decimal | int) -> Money:
        """Multiply by a rational factor, rounding half-up to the minor unit."""
        return Money(_round_half_up(Fraction(self.minor) * Fraction(factor)))

    def clamp_zero(self) -> Money:
        """``max(0, self)``."""
        return self if self.minor > 0 else Money(0)

    def is_zero(self) -> bool:
        return self.minor == 0

    def is_positive(self) -> bool:
        return self.minor > 0

    # -- conversion ---------------------------------------------------------

    def to_decimal(self) -> Decimal:
        return (Decimal(self.minor) / MINOR_UNITS).quantize(_TWO_PLACES)

    def __str__(self) -> str:
        return str(self.to_decimal())

    def __repr__(self) -> str:
        return f"Money('{self}')"


def money_sum(amounts) -> Money:
    """Sum an iterable of ``Money``; the empty sum is zero."""
    total = 0
    for amount in amounts:
        total += amount.minor
    return Money(total)


def parse_money(raw: str | int | Decimal | None) -> Money:
    """Parse user-entered money text.

    Every character other than digits and ``.`` is dropped, anything after a
    second dot is ignored and the fraction is clamped to two digits. Input
    without a single digit raises ``MoneyParseError``.
    """
    if raw is None:
        raise MoneyParseError(raw)
    if isinstance(raw, (int, Decimal)) and not isinstance(raw, bool):
        return Money.from_decimal(raw)

    cleaned = _NON_NUMERIC.sub("", str(raw))
    whole, _, rest = cleaned.partition(".")
    fraction = rest.split(".", 1)[0][:2]
    if not whole and not fraction:
        raise MoneyParseError(raw)

    minor = int(whole or "0") * MINOR_UNITS + int(fraction.ljust(2, "0"))
    return Money(minor)


def format_money(amount: Money, currency: str = "NGN") -> str:
    """Human display with thousands separators, e.g. ``NGN 150,000.00``."""
    sign = "-" if amount.minor < 0 else ""
    return f"{currency} {sign}{abs(amount.to_decimal()):,.2f}"
