"""Shared schema pieces: money fields, ledger summary, error bodies."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator

from stayledger.core.enums import PaymentStatus
from stayledger.core.errors import MoneyParseError
from stayledger.core.ledger import LedgerSummary
from stayledger.core.money import Money, parse_money


def _money_input(value: object) -> Decimal:
    """Accept numbers or receptionist-typed text such as ``"NGN 40,000"``.

    JSON numbers keep their sign and exponent so the engine can reject
    non-positive amounts; only text goes through the desk input mask.
    """
    if isinstance(value, Money):
        return value.to_decimal()
    try:
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return Money.from_decimal(Decimal(str(value))).to_decimal()
        return parse_money(value).to_decimal()  # type: ignore[arg-type]
    except MoneyParseError as e:
        raise ValueError(e.message) from None


MoneyInput = Annotated[Decimal, BeforeValidator(_money_input)]


def to_money(value: Decimal | None) -> Money | None:
    return None if value is None else Money.from_decimal(value)


class ErrorBody(BaseModel):
    code: str
    message: str
    outstanding: Decimal | None = None
    conflicting_booking_ids: list[str] | None = None


class ErrorResponse(BaseModel):
    """Body of every 404/409/422 raised by the booking engine."""

    detail: ErrorBody


class LedgerSummaryResponse(BaseModel):
    total_amount: Decimal
    charges_total: Decimal
    total_bill: Decimal
    paid_total: Decimal
    outstanding_amount: Decimal
    payment_status: PaymentStatus

    @classmethod
    def from_summary(cls, summary: LedgerSummary) -> "LedgerSummaryResponse":
        return cls(
            total_amount=summary.total_amount.to_decimal(),
            charges_total=summary.charges_total.to_decimal(),
            total_bill=summary.total_bill.to_decimal(),
            paid_total=summary.paid_total.to_decimal(),
            outstanding_amount=summary.outstanding_amount.to_decimal(),
            payment_status=summary.payment_status,
        )


ERROR_RESPONSES: dict = {
    404: {"model": ErrorResponse, "description": "Unit or booking not found"},
    409: {"model": ErrorResponse, "description": "Operation conflicts with the booking's current state"},
    422: {"model": ErrorResponse, "description": "Invalid input"},
}
