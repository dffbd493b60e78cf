"""Meter reading routes: period sheets, continuity and upserts."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from roombill.core.database import get_db
from roombill.schemas.meter_reading import (
    BulkReadingResult,
    MeterReadingBulkCreate,
    MeterReadingCreate,
    MeterReadingResponse,
    MeterSheetRow,
    PreviousReading,
)
from roombill.services import readings as reading_service
from roombill.services.room import get_room

router = APIRouter(prefix="/meters", tags=["meter-readings"])

Month = Annotated[int, Path(ge=1, le=12, description="Billing month, 1-12")]
Year = Annotated[int, Path(ge=1, description="Billing year")]


@router.get("/rooms/{month}/{year}", response_model=list[MeterSheetRow])
def get_meter_sheet(
    month: Month,
    year: Year,
    db: Session = Depends(get_db),
) -> list[MeterSheetRow]:
    """Get every room with its reading for a period.

    Rooms not read yet carry the previous values resolved from their
    latest earlier reading.
    """
    return reading_service.get_meter_sheet(db, month, year)


@router.get("/rooms/{room_id}/previous/{month}/{year}", response_model=PreviousReading)
def get_previous_reading(
    room_id: int,
    month: Month,
    year: Year,
    db: Session = Depends(get_db),
) -> PreviousReading:
    """Resolve a room's previous meter values for a period."""
    get_room(db, room_id)
    return reading_service.resolve_previous(db, room_id, month, year)


@router.get("/{month}/{year}", response_model=list[MeterReadingResponse])
def get_period_readings(
    month: Month,
    year: Year,
    db: Session = Depends(get_db),
) -> list[MeterReadingResponse]:
    """Get the saved readings of a period."""
    readings = reading_service.get_readings_for_period(db, month, year)
    return [MeterReadingResponse.model_validate(r) for r in readings]


@router.post(
    "/",
    response_model=MeterReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_reading(
    reading_data: MeterReadingCreate,
    response: Response,
    db: Session = Depends(get_db),
) -> MeterReadingResponse:
    """Record a room's readings for a period (201 when new, 200 when replaced)."""
    reading, created = reading_service.record_reading(db, reading_data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return MeterReadingResponse.model_validate(reading)


@router.post("/bulk", response_model=BulkReadingResult)
def record_readings_bulk(
    bulk_data: MeterReadingBulkCreate,
    db: Session = Depends(get_db),
) -> BulkReadingResult:
    """Record readings for many rooms; each row succeeds or fails on its own."""
    outcomes = reading_service.record_readings_bulk(db, bulk_data.readings)
    failed = sum(1 for o in outcomes if o.status == "failed")
    return BulkReadingResult(
        results=outcomes,
        succeeded=len(outcomes) - failed,
        failed=failed,
    )
