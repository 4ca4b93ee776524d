"""Unit model: bookable rooms and apartments, with an optional promotional rate."""

import uuid
from datetime import date, datetime

from sqlalchemy import BigInteger, Boolean, Date, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stayledger.database import Base, UUIDPrimaryKeyMixin


class Unit(UUIDPrimaryKeyMixin, Base):
    """A room or apartment that can be booked night by night."""

    __tablename__ = "units"

    tenant_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    property_name: Mapped[str | None] = mapped_column(String(255), default=None)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_type: Mapped[str] = mapped_column(String(20), default="ROOM")  # ROOM, APARTMENT
    capacity: Mapped[int] = mapped_column(Integer, default=1)
    base_price_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="NGN")

    # Promotional rate. ``promo_value_hundredths`` is the percent (PERCENT_OFF)
    # or the nightly amount in minor units (FIXED_NIGHTLY), both scaled by 100.
    promo_kind: Mapped[str | None] = mapped_column(String(20), default=None)  # PERCENT_OFF, FIXED_NIGHTLY
    promo_value_hundredths: Mapped[int | None] = mapped_column(BigInteger, default=None)
    promo_start_date: Mapped[date | None] = mapped_column(Date, default=None)
    promo_end_date: Mapped[date | None] = mapped_column(Date, default=None)
    promo_label: Mapped[str | None] = mapped_column(String(255), default=None)
    promo_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(server_default=func.now(), onupdate=func.now())

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        back_populates="unit", lazy="selectin", cascade="all, delete-orphan"
    )

    def clear_promotion(self) -> None:
        self.promo_kind = None
        self.promo_value_hundredths = None
        self.promo_start_date = None
        self.promo_end_date = None
        self.promo_label = None
        self.promo_active = True

    def __repr__(self) -> str:
        return f"<Unit(id={self.id}, name={self.name!r}, type={self.unit_type!r})>"
