"""Booking model: a guest's reservation of a unit for a range of nights."""

import uuid
from datetime import date, datetime

from sqlalchemy import BigInteger, Date, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stayledger.core.enums import BookingStatus
from stayledger.database import Base, UTCDateTime, UUIDPrimaryKeyMixin


class Booking(UUIDPrimaryKeyMixin, Base):
    """A reservation linking a guest to a unit for specific dates.

    Money columns hold integer minor units. ``total_amount_minor`` is fixed at
    creation; payments and charges live in their own append-only tables.
    """

    __tablename__ = "bookings"

    tenant_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    unit_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    guest_name: Mapped[str | None] = mapped_column(String(255), default=None)
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=BookingStatus.PENDING.value,
        index=True,
    )  # PENDING, CONFIRMED, CHECKED_IN, CHECKED_OUT, CANCELLED
    currency: Mapped[str] = mapped_column(String(3), default="NGN")
    nightly_rate_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    computed_total_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    total_amount_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    promotion_label: Mapped[str | None] = mapped_column(String(255), default=None)
    special_requests: Mapped[str | None] = mapped_column(Text, default=None)
    checkout_notes: Mapped[str | None] = mapped_column(Text, default=None)
    created_by: Mapped[str | None] = mapped_column(String(100), default=None)

    checked_in_at: Mapped[datetime | None] = mapped_column(UTCDateTime, default=None)
    checked_out_at: Mapped[datetime | None] = mapped_column(UTCDateTime, default=None)
    cancelled_at: Mapped[datetime | None] = mapped_column(UTCDateTime, default=None)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    unit: Mapped["Unit"] = relationship(back_populates="bookings", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    payments: Mapped[list["Payment"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="booking", lazy="selectin", cascade="all, delete-orphan", order_by="Payment.created_at"
    )
    charges: Mapped[list["Charge"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="booking", lazy="selectin", cascade="all, delete-orphan", order_by="Charge.posted_at"
    )
    refund: Mapped["Refund"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="booking", lazy="selectin", cascade="all, delete-orphan", uselist=False
    )

    __table_args__ = (
        Index("ix_bookings_check_in", "check_in"),
        Index("ix_bookings_unit_dates", "unit_id", "check_in", "check_out"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, unit_id={self.unit_id}, guest_id={self.guest_id}, status={self.status})>"
