"""MeterReading database model - the per-room, per-period ledger."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roombill.core.database import Base
from roombill.services.calculator import compute_usage

if TYPE_CHECKING:
    from roombill.models.room import Room


class MeterReading(Base):
    """Water and electric readings of one room for one billing period.

    A current value of None or 0 means the meter has not been read yet
    for the period.
    """

    __tablename__ = "meter_readings"
    __table_args__ = (
        UniqueConstraint(
            "room_id",
            "reading_month",
            "reading_year",
            name="uq_meter_reading_room_period",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    # Billing period
    reading_month: Mapped[int] = mapped_column(index=True)
    reading_year: Mapped[int] = mapped_column(index=True)

    # Meter values (using Decimal for precision)
    water_previous: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    water_current: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    electric_previous: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    electric_current: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    recorded_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        index=True,
    )  # Last time the values were written

    # Foreign keys
    room_id: Mapped[int] = mapped_column(ForeignKey("rooms.id"), index=True)

    # Relationships
    room: Mapped["Room"] = relationship(back_populates="readings")

    @property
    def water_usage(self) -> Decimal | None:
        return compute_usage(self.water_previous, self.water_current)

    @property
    def electric_usage(self) -> Decimal | None:
        return compute_usage(self.electric_previous, self.electric_current)

    @property
    def is_recorded(self) -> bool:
        """Whether at least one meter was actually read in this period."""
        return any(v is not None and v > 0 for v in (self.water_current, self.electric_current))

    @property
    def room_number(self) -> str | None:
        return self.room.room_number if self.room else None

    @property
    def floor_name(self) -> str | None:
        return self.room.floor_name if self.room else None
