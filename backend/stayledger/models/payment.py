"""Payment model: append-only money received against a booking."""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stayledger.database import Base, UTCDateTime, UUIDPrimaryKeyMixin


class Payment(UUIDPrimaryKeyMixin, Base):
    """A manually recorded payment. Rows are never updated or deleted."""

    __tablename__ = "payments"

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="NGN")
    reference: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    recorded_by: Mapped[str | None] = mapped_column(String(100), default=None)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    booking: Mapped["Booking"] = relationship(back_populates="payments")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (CheckConstraint("amount_minor > 0", name="ck_payments_amount_positive"),)

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, booking_id={self.booking_id}, amount_minor={self.amount_minor})>"
