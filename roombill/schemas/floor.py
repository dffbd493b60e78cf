"""Floor Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from roombill.schemas.room import RoomResponse


class FloorBase(BaseModel):
    """Base floor schema."""

    name: str = Field(min_length=1, max_length=100)


class FloorCreate(FloorBase):
    """Schema for creating a new floor."""

    sort_order: int = 0


class FloorUpdate(BaseModel):
    """Schema for updating a floor."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    sort_order: int | None = None


class FloorResponse(FloorBase):
    """Schema for floor response."""

    id: int
    sort_order: int
    created_at: datetime

    model_config = {"from_attributes": True}


class FloorWithRooms(FloorResponse):
    """A floor together with its rooms."""

    rooms: list[RoomResponse]
