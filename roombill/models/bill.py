"""Bill database model - a point-in-time snapshot of one room's charges."""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roombill.core.database import Base
from roombill.models.enums import CalculationType

if TYPE_CHECKING:
    from roombill.models.room import Room
    from roombill.models.tenant import Tenant


class Bill(Base):
    """Monthly bill of a room.

    Rates and prices are copied at save time so that later changes to
    settings or room pricing leave stored bills untouched.
    """

    __tablename__ = "bills"
    __table_args__ = (
        UniqueConstraint("room_id", "bill_month", "bill_year", name="uq_bill_room_period"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    invoice_no: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)

    # Billing period
    bill_month: Mapped[int] = mapped_column(index=True)
    bill_year: Mapped[int] = mapped_column(index=True)

    # Line items
    room_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    water_type: Mapped[CalculationType] = mapped_column(String(10), default=CalculationType.UNIT)
    water_units: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    water_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)
    water_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    electric_type: Mapped[CalculationType] = mapped_column(
        String(10),
        default=CalculationType.UNIT,
    )
    electric_units: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    electric_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)
    electric_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    trash_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    other_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    other_description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    # Payment
    is_paid: Mapped[bool] = mapped_column(default=False)
    paid_date: Mapped[date | None] = mapped_column(nullable=True)

    # Foreign keys
    room_id: Mapped[int] = mapped_column(ForeignKey("rooms.id"), index=True)
    tenant_id: Mapped[int | None] = mapped_column(ForeignKey("tenants.id"), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Relationships
    room: Mapped["Room"] = relationship(back_populates="bills")
    tenant: Mapped["Tenant | None"] = relationship()

    def line_item_sum(self) -> Decimal:
        """Sum of all charged line items."""
        return sum(
            (
                self.room_price or Decimal("0"),
                self.water_amount or Decimal("0"),
                self.electric_amount or Decimal("0"),
                self.trash_fee or Decimal("0"),
                self.other_amount or Decimal("0"),
            ),
            Decimal("0"),
        )

    @property
    def room_number(self) -> str | None:
        return self.room.room_number if self.room else None

    @property
    def floor_name(self) -> str | None:
        return self.room.floor_name if self.room else None

    @property
    def tenant_name(self) -> str | None:
        return self.tenant.name if self.tenant else None
