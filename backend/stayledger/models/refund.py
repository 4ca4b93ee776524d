"""Refund model: the early-checkout refund decision recorded at checkout."""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stayledger.database import Base, UTCDateTime, UUIDPrimaryKeyMixin


class Refund(UUIDPrimaryKeyMixin, Base):
    """One per booking at most; written in the same transaction as the checkout."""

    __tablename__ = "refunds"

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    policy: Mapped[str] = mapped_column(String(20), nullable=False)  # NO_REFUND, PARTIAL, FLEXIBLE
    booked_nights: Mapped[int] = mapped_column(Integer, nullable=False)
    used_nights: Mapped[int] = mapped_column(Integer, nullable=False)
    eligible_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    penalty_minor: Mapped[int] = mapped_column(BigInteger, default=0)
    suggested_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    refund_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    approved: Mapped[bool] = mapped_column(Boolean, default=False)
    reason: Mapped[str | None] = mapped_column(Text, default=None)
    recorded_by: Mapped[str | None] = mapped_column(String(100), default=None)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    booking: Mapped["Booking"] = relationship(back_populates="refund")  # type: ignore[name-defined]  # noqa: F821

    def __repr__(self) -> str:
        return f"<Refund(id={self.id}, booking_id={self.booking_id}, refund_minor={self.refund_minor})>"
