"""Charge model: damage and overstay amounts added to what a booking owes."""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stayledger.database import Base, UTCDateTime, UUIDPrimaryKeyMixin


class Charge(UUIDPrimaryKeyMixin, Base):
    """An append-only charge. There is no void operation."""

    __tablename__ = "charges"

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)  # DAMAGE, OVERSTAY
    amount_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    posted_by: Mapped[str | None] = mapped_column(String(100), default=None)
    posted_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    booking: Mapped["Booking"] = relationship(back_populates="charges")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (CheckConstraint("amount_minor >= 0", name="ck_charges_amount_non_negative"),)

    def __repr__(self) -> str:
        return f"<Charge(id={self.id}, booking_id={self.booking_id}, kind={self.kind}, amount_minor={self.amount_minor})>"
