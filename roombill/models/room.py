"""Room database model."""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roombill.core.database import Base
from roombill.models.enums import CalculationType

if TYPE_CHECKING:
    from roombill.models.bill import Bill
    from roombill.models.floor import Floor
    from roombill.models.meter_reading import MeterReading
    from roombill.models.tenant import Tenant


class Room(Base):
    """Rentable room with its pricing configuration."""

    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    room_number: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    room_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))

    # Utility pricing
    water_calculation_type: Mapped[CalculationType] = mapped_column(
        String(10),
        default=CalculationType.UNIT,
    )
    water_fixed_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    electric_calculation_type: Mapped[CalculationType] = mapped_column(
        String(10),
        default=CalculationType.UNIT,
    )
    electric_fixed_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))

    # Foreign keys
    floor_id: Mapped[int] = mapped_column(ForeignKey("floors.id"), index=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    floor: Mapped["Floor"] = relationship(back_populates="rooms")
    tenants: Mapped[list["Tenant"]] = relationship(back_populates="room")
    readings: Mapped[list["MeterReading"]] = relationship(
        back_populates="room",
        cascade="all, delete-orphan",
    )
    bills: Mapped[list["Bill"]] = relationship(back_populates="room")

    @property
    def active_tenants(self) -> list["Tenant"]:
        """Tenants currently living in this room."""
        return [t for t in self.tenants if t.is_active]

    @property
    def active_tenant(self) -> "Tenant | None":
        """The active tenant, if any."""
        active = self.active_tenants
        return active[0] if active else None

    @property
    def is_occupied(self) -> bool:
        """Occupancy is derived from tenant activity, never stored."""
        return bool(self.active_tenants)

    @property
    def floor_name(self) -> str | None:
        return self.floor.name if self.floor else None
