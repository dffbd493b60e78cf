"""MeterReading Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, Field


class MeterReadingBase(BaseModel):
    """Base meter reading schema."""

    room_id: int
    reading_month: int = Field(ge=1, le=12)
    reading_year: int = Field(ge=1)


class MeterReadingCreate(MeterReadingBase):
    """Schema for recording the readings of one room for one period.

    Omitted previous values are taken from the latest earlier reading of
    the room. Omitted current values mean the meter has not been read.
    """

    water_previous: Decimal | None = Field(default=None, ge=0)
    water_current: Decimal | None = Field(default=None, ge=0)
    electric_previous: Decimal | None = Field(default=None, ge=0)
    electric_current: Decimal | None = Field(default=None, ge=0)


class MeterReadingBulkCreate(BaseModel):
    """Schema for saving the readings of many rooms at once.

    Rows are validated one by one so that a malformed row is reported
    without rejecting the rest of the batch.
    """

    readings: list[dict[str, Any]]


class MeterReadingResponse(MeterReadingBase):
    """Schema for meter reading response."""

    id: int
    water_previous: Decimal
    water_current: Decimal | None
    electric_previous: Decimal
    electric_current: Decimal | None
    water_usage: Decimal | None
    electric_usage: Decimal | None
    room_number: str | None = None
    floor_name: str | None = None
    recorded_at: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class ReadingOutcome(BaseModel):
    """Result of one row of a bulk save."""

    index: int
    room_id: int | None
    status: Literal["created", "updated", "failed"]
    reading_id: int | None = None
    detail: str | None = None


class BulkReadingResult(BaseModel):
    """Per-row results of a bulk save."""

    results: list[ReadingOutcome]
    succeeded: int
    failed: int


class PreviousReading(BaseModel):
    """Previous meter values resolved for a period."""

    room_id: int
    reading_month: int
    reading_year: int
    water_previous: Decimal
    electric_previous: Decimal
    source_month: int | None = None  # Period the values were taken from
    source_year: int | None = None


class UtilityReadingStatus(BaseModel):
    """One utility's readings and usage for a period.

    `usage` is None while the meter has not been read (current missing or 0).
    A negative usage is reported as-is and flagged.
    """

    previous: Decimal
    current: Decimal | None
    usage: Decimal | None
    recorded: bool
    negative: bool


class MeterSheetRow(BaseModel):
    """A room on the meter-entry sheet of a period."""

    room_id: int
    room_number: str
    floor_id: int
    floor_name: str
    is_occupied: bool
    water_calculation_type: str
    electric_calculation_type: str
    reading_id: int | None
    resolved_water_previous: Decimal
    resolved_electric_previous: Decimal
    water: UtilityReadingStatus
    electric: UtilityReadingStatus


class MeterReadingHistory(BaseModel):
    """Schema for paginated reading history of a room."""

    room_id: int
    readings: list[MeterReadingResponse]
    total: int
    limit: int
    offset: int
