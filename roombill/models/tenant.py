"""Tenant database model."""

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roombill.core.database import Base

if TYPE_CHECKING:
    from roombill.models.room import Room


class Tenant(Base):
    """Person renting a room."""

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    id_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    move_in_date: Mapped[date | None] = mapped_column(nullable=True)
    move_out_date: Mapped[date | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, index=True)

    # Stored document references (uploads are handled elsewhere)
    id_card_image: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contract_image: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Foreign keys
    room_id: Mapped[int | None] = mapped_column(
        ForeignKey("rooms.id"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    room: Mapped["Room | None"] = relationship(back_populates="tenants")

    @property
    def room_number(self) -> str | None:
        return self.room.room_number if self.room else None

    @property
    def floor_name(self) -> str | None:
        return self.room.floor_name if self.room else None
