"""Billing schemas: calculator inputs/outputs and bill records."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from roombill.models.enums import CalculationType


class RoomPricing(BaseModel):
    """Pricing configuration read from a room.

    Calculation types are kept as plain strings so that the calculator,
    not validation, decides what an unknown value means.
    """

    room_id: int | None = Field(default=None, validation_alias="id")
    room_price: Decimal | None = None
    water_calculation_type: str
    water_fixed_amount: Decimal | None = None
    electric_calculation_type: str
    electric_fixed_amount: Decimal | None = None

    model_config = {"from_attributes": True, "populate_by_name": True}


class MeteredUnits(BaseModel):
    """Precomputed usage of a period."""

    water_units: Decimal = Decimal("0")
    electric_units: Decimal = Decimal("0")


class BillLineItems(BaseModel):
    """Computed charges of one bill."""

    room_price: Decimal
    water_type: str
    water_units: Decimal
    water_rate: Decimal | None
    water_amount: Decimal
    electric_type: str
    electric_units: Decimal
    electric_rate: Decimal | None
    electric_amount: Decimal
    trash_fee: Decimal
    other_amount: Decimal
    total_amount: Decimal
    warnings: list[str] = []


class GeneratedBill(BillLineItems):
    """A computed, not yet saved, bill of a room."""

    room_id: int
    room_number: str
    floor_name: str
    is_occupied: bool
    tenant_id: int | None
    tenant_name: str | None
    tenant_phone: str | None
    invoice_no: str
    bill_month: int
    bill_year: int
    water_previous: Decimal | None
    water_current: Decimal | None
    electric_previous: Decimal | None
    electric_current: Decimal | None


class BillGenerationError(BaseModel):
    """A room that could not be billed."""

    room_id: int
    room_number: str
    detail: str


class BillGenerationResult(BaseModel):
    """Bills computed for a period."""

    bill_month: int
    bill_year: int
    bills: list[GeneratedBill]
    errors: list[BillGenerationError]


class BillSave(BaseModel):
    """Schema for saving (creating or replacing) a bill.

    When total_amount is given it must equal the sum of the line items.
    """

    room_id: int
    bill_month: int = Field(ge=1, le=12)
    bill_year: int = Field(ge=1)
    tenant_id: int | None = None
    invoice_no: str | None = Field(default=None, max_length=50)
    room_price: Decimal = Field(default=Decimal("0"), ge=0)
    water_type: CalculationType = CalculationType.UNIT
    water_units: Decimal = Field(default=Decimal("0"), decimal_places=2)
    water_rate: Decimal | None = Field(default=None, ge=0, decimal_places=4)
    water_amount: Decimal = Decimal("0")
    electric_type: CalculationType = CalculationType.UNIT
    electric_units: Decimal = Field(default=Decimal("0"), decimal_places=2)
    electric_rate: Decimal | None = Field(default=None, ge=0, decimal_places=4)
    electric_amount: Decimal = Decimal("0")
    trash_fee: Decimal = Field(default=Decimal("0"), ge=0)
    other_amount: Decimal = Decimal("0")
    other_description: str | None = Field(default=None, max_length=255)
    total_amount: Decimal | None = None

    model_config = {"use_enum_values": True}


class BillResponse(BaseModel):
    """Schema for a saved bill."""

    id: int
    room_id: int
    tenant_id: int | None
    invoice_no: str | None
    bill_month: int
    bill_year: int
    room_price: Decimal
    water_type: str
    water_units: Decimal
    water_rate: Decimal | None
    water_amount: Decimal
    electric_type: str
    electric_units: Decimal
    electric_rate: Decimal | None
    electric_amount: Decimal
    trash_fee: Decimal
    other_amount: Decimal
    other_description: str | None
    total_amount: Decimal
    is_paid: bool
    paid_date: date | None
    room_number: str | None = None
    floor_name: str | None = None
    tenant_name: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RoomTenantConflict(BaseModel):
    """A room referenced by more than one active tenant."""

    room_id: int
    room_number: str
    tenant_ids: list[int]


class BillTotalMismatch(BaseModel):
    """A saved bill whose total differs from its line items."""

    bill_id: int
    room_id: int
    bill_month: int
    bill_year: int
    total_amount: Decimal
    expected_total: Decimal


class ConsistencyReport(BaseModel):
    """Derived-state problems found in the stored data."""

    is_consistent: bool
    rooms_with_multiple_tenants: list[RoomTenantConflict]
    bills_with_wrong_total: list[BillTotalMismatch]
