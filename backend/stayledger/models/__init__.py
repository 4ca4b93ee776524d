"""SQLAlchemy models for StayLedger.

All models are imported here so that ``Base.metadata`` knows every table
before ``create_all`` runs. If you add a new model, import it in this file.
"""

from stayledger.models.booking import Booking
from stayledger.models.charge import Charge
from stayledger.models.payment import Payment
from stayledger.models.refund import Refund
from stayledger.models.unit import Unit

__all__ = [
    "Booking",
    "Charge",
    "Payment",
    "Refund",
    "Unit",
]
