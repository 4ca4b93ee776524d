"""Status and kind enumerations shared by the engine, the ORM and the API."""

from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELLED = "CANCELLED"


# Statuses that hold a unit's nights; CANCELLED and CHECKED_OUT free them.
BLOCKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN})


class PaymentStatus(str, Enum):
    UNPAID = "UNPAID"
    PARTPAID = "PARTPAID"
    PAID = "PAID"


class ChargeKind(str, Enum):
    DAMAGE = "DAMAGE"
    OVERSTAY = "OVERSTAY"


class PromotionKind(str, Enum):
    PERCENT_OFF = "PERCENT_OFF"
    FIXED_NIGHTLY = "FIXED_NIGHTLY"


class RefundPolicy(str, Enum):
    NO_REFUND = "NO_REFUND"
    PARTIAL = "PARTIAL"
    FLEXIBLE = "FLEXIBLE"
