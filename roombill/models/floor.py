"""Floor database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roombill.core.database import Base

if TYPE_CHECKING:
    from roombill.models.room import Room


class Floor(Base):
    """Building floor that rooms belong to."""

    __tablename__ = "floors"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    sort_order: Mapped[int] = mapped_column(default=0, index=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    rooms: Mapped[list["Room"]] = relationship(
        back_populates="floor",
        order_by="Room.room_number",
    )
