"""Room Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from roombill.models.enums import CalculationType


class RoomBase(BaseModel):
    """Base room schema."""

    floor_id: int
    room_number: str = Field(min_length=1, max_length=20)
    room_price: Decimal = Field(default=Decimal("0"), ge=0)
    water_calculation_type: CalculationType = CalculationType.UNIT
    water_fixed_amount: Decimal = Field(default=Decimal("0"), ge=0)
    electric_calculation_type: CalculationType = CalculationType.UNIT
    electric_fixed_amount: Decimal = Field(default=Decimal("0"), ge=0)

    model_config = {"use_enum_values": True}


class RoomCreate(RoomBase):
    """Schema for creating a new room."""

    pass


class RoomUpdate(BaseModel):
    """Schema for updating a room.

    Occupancy is not part of this schema: it follows tenant activity.
    """

    floor_id: int | None = None
    room_number: str | None = Field(default=None, min_length=1, max_length=20)
    room_price: Decimal | None = Field(default=None, ge=0)
    water_calculation_type: CalculationType | None = None
    water_fixed_amount: Decimal | None = Field(default=None, ge=0)
    electric_calculation_type: CalculationType | None = None
    electric_fixed_amount: Decimal | None = Field(default=None, ge=0)

    model_config = {"use_enum_values": True}


class RoomResponse(RoomBase):
    """Schema for room response, joined with floor and active tenant."""

    id: int
    # Plain strings: stored rows may carry types that billing will reject
    water_calculation_type: str
    electric_calculation_type: str
    floor_name: str | None = None
    is_occupied: bool
    tenant_id: int | None = None
    tenant_name: str | None = None
    tenant_phone: str | None = None
    created_at: datetime
