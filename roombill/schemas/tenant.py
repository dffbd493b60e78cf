"""Tenant Pydantic schemas for request/response validation."""

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator


class TenantBase(BaseModel):
    """Base tenant schema."""

    name: str = Field(min_length=1, max_length=100)
    room_id: int | None = None
    phone: str | None = Field(default=None, max_length=20)
    id_number: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=255)
    move_in_date: date | None = None


class TenantCreate(TenantBase):
    """Schema for creating a new tenant."""

    is_active: bool = True
    id_card_image: str | None = None
    contract_image: str | None = None


class TenantUpdate(BaseModel):
    """Schema for updating a tenant. Only provided fields are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    room_id: int | None = None
    phone: str | None = Field(default=None, max_length=20)
    id_number: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=255)
    move_in_date: date | None = None
    move_out_date: date | None = None
    is_active: bool | None = None
    id_card_image: str | None = None
    contract_image: str | None = None

    @model_validator(mode="after")
    def check_move_out_after_move_in(self) -> "TenantUpdate":
        """Reject a move-out date before the move-in date when both are given."""
        if self.move_in_date and self.move_out_date and self.move_out_date < self.move_in_date:
            raise ValueError("Move-out date cannot be before move-in date")
        return self


class TenantResponse(TenantBase):
    """Schema for tenant response."""

    id: int
    move_out_date: date | None
    is_active: bool
    id_card_image: str | None
    contract_image: str | None
    room_number: str | None = None
    floor_name: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
