"""Booking availability, pricing and settlement engine.

Pure functions and value objects only. No database, HTTP or global
state. ``now`` is always an explicit argument.
"""

from stayledger.core.availability import (
    blocked_dates,
    ensure_bookable,
    is_bookable,
    is_date_blocked,
    ranges_overlap,
)
from stayledger.core.checkout import (
    CheckoutCertification,
    CheckoutRequest,
    CheckoutSettlement,
    RefundDecision,
    RefundRequest,
    add_damage_charge,
    add_overstay_charge,
    complete_checkout,
    compute_refund,
    preview_checkout,
)
from stayledger.core.clock import Clock, FixedClock, OperatingCalendar, SystemClock
from stayledger.core.ledger import PaymentLedger
from stayledger.core.money import Money, format_money, parse_money
from stayledger.core.pricing import StayQuote, apply_total_override, price_stay
from stayledger.core.records import BookingSnapshot, Charge, DateRange, Payment, Promotion, UnitRate

__all__ = [
    "BookingSnapshot",
    "Charge",
    "CheckoutCertification",
    "CheckoutRequest",
    "CheckoutSettlement",
    "Clock",
    "DateRange",
    "FixedClock",
    "Money",
    "OperatingCalendar",
    "Payment",
    "PaymentLedger",
    "Promotion",
    "RefundDecision",
    "RefundRequest",
    "StayQuote",
    "SystemClock",
    "UnitRate",
    "add_damage_charge",
    "add_overstay_charge",
    "apply_total_override",
    "blocked_dates",
    "complete_checkout",
    "compute_refund",
    "ensure_bookable",
    "format_money",
    "is_bookable",
    "is_date_blocked",
    "parse_money",
    "preview_checkout",
    "price_stay",
    "ranges_overlap",
]
