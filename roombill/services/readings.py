"""Meter reading ledger and reading continuity resolution."""

import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roombill.models.floor import Floor
from roombill.models.meter_reading import MeterReading
from roombill.models.room import Room
from roombill.schemas.meter_reading import (
    MeterReadingCreate,
    MeterSheetRow,
    PreviousReading,
    ReadingOutcome,
    UtilityReadingStatus,
)
from roombill.services.calculator import compute_usage
from roombill.services.room import get_room, get_rooms

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def get_reading(
    db: Session,
    room_id: int,
    month: int,
    year: int,
) -> MeterReading | None:
    """Get the reading of a room for a period, if any."""
    return (
        db.query(MeterReading)
        .filter(
            and_(
                MeterReading.room_id == room_id,
                MeterReading.reading_month == month,
                MeterReading.reading_year == year,
            )
        )
        .first()
    )


def find_latest_prior_reading(
    db: Session,
    room_id: int,
    month: int,
    year: int,
) -> MeterReading | None:
    """Find the most recent recorded reading strictly before a period.

    Periods are ordered by (year, month), so skipped months and year
    rollover need no special handling. Readings where neither meter was
    read (current missing or 0) are ignored.
    """
    return (
        db.query(MeterReading)
        .filter(
            MeterReading.room_id == room_id,
            or_(
                MeterReading.reading_year < year,
                and_(
                    MeterReading.reading_year == year,
                    MeterReading.reading_month < month,
                ),
            ),
            or_(
                MeterReading.water_current > 0,
                MeterReading.electric_current > 0,
            ),
        )
        .order_by(MeterReading.reading_year.desc(), MeterReading.reading_month.desc())
        .first()
    )


def resolve_previous(
    db: Session,
    room_id: int,
    month: int,
    year: int,
) -> PreviousReading:
    """Previous meter values for a period: the current values of the
    closest earlier period with data, or 0 for a room never read before.
    """
    prior = find_latest_prior_reading(db, room_id, month, year)
    if prior is None:
        return PreviousReading(
            room_id=room_id,
            reading_month=month,
            reading_year=year,
            water_previous=ZERO,
            electric_previous=ZERO,
        )
    return PreviousReading(
        room_id=room_id,
        reading_month=month,
        reading_year=year,
        water_previous=prior.water_current or ZERO,
        electric_previous=prior.electric_current or ZERO,
        source_month=prior.reading_month,
        source_year=prior.reading_year,
    )


def _upsert_reading(db: Session, data: MeterReadingCreate) -> tuple[MeterReading, bool]:
    get_room(db, data.room_id)

    water_previous = data.water_previous
    electric_previous = data.electric_previous
    if water_previous is None or electric_previous is None:
        resolved = resolve_previous(db, data.room_id, data.reading_month, data.reading_year)
        if water_previous is None:
            water_previous = resolved.water_previous
        if electric_previous is None:
            electric_previous = resolved.electric_previous

    reading = get_reading(db, data.room_id, data.reading_month, data.reading_year)
    created = reading is None
    if created:
        reading = MeterReading(
            room_id=data.room_id,
            reading_month=data.reading_month,
            reading_year=data.reading_year,
        )
        db.add(reading)

    reading.water_previous = water_previous
    reading.water_current = data.water_current
    reading.electric_previous = electric_previous
    reading.electric_current = data.electric_current
    reading.recorded_at = datetime.now(UTC)
    return reading, created


def record_reading(db: Session, data: MeterReadingCreate) -> tuple[MeterReading, bool]:
    """Record the readings of one room for one period.

    Upsert keyed by (room, month, year): an existing reading has all four
    values replaced. Returns the reading and whether it was created.
    """
    reading, created = _upsert_reading(db, data)
    db.commit()
    db.refresh(reading)
    return reading, created


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"])
    return f"{field}: {error['msg']}" if field else error["msg"]


def record_readings_bulk(db: Session, rows: list[dict[str, Any]]) -> list[ReadingOutcome]:
    """Record a batch of readings, one transaction per row.

    A row that fails validation, names an unknown room, or fails in the
    database is reported as failed; the other rows are still saved.
    """
    outcomes: list[ReadingOutcome] = []
    for index, row in enumerate(rows):
        room_id = row.get("room_id") if isinstance(row.get("room_id"), int) else None
        try:
            data = MeterReadingCreate.model_validate(row)
            reading, created = _upsert_reading(db, data)
            db.commit()
        except ValidationError as exc:
            outcomes.append(
                ReadingOutcome(
                    index=index,
                    room_id=room_id,
                    status="failed",
                    detail=_first_error(exc),
                )
            )
            continue
        except HTTPException as exc:
            db.rollback()
            outcomes.append(
                ReadingOutcome(index=index, room_id=room_id, status="failed", detail=exc.detail)
            )
            continue
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Saving reading row %d for room %s failed", index, room_id)
            outcomes.append(
                ReadingOutcome(
                    index=index,
                    room_id=room_id,
                    status="failed",
                    detail="Could not save this reading",
                )
            )
            continue

        outcomes.append(
            ReadingOutcome(
                index=index,
                room_id=reading.room_id,
                status="created" if created else "updated",
                reading_id=reading.id,
            )
        )

    failed = sum(1 for o in outcomes if o.status == "failed")
    if failed:
        logger.warning("Bulk reading save: %d of %d rows failed", failed, len(outcomes))
    return outcomes


def get_readings_for_period(db: Session, month: int, year: int) -> list[MeterReading]:
    """Get the saved readings of a period in building order."""
    return (
        db.query(MeterReading)
        .join(MeterReading.room)
        .join(Room.floor)
        .filter(
            MeterReading.reading_month == month,
            MeterReading.reading_year == year,
        )
        .order_by(Floor.sort_order, Room.room_number)
        .all()
    )


def get_readings_history(
    db: Session,
    room_id: int,
    limit: int = 24,
    offset: int = 0,
) -> tuple[list[MeterReading], int]:
    """Get a room's readings, newest period first, with pagination."""
    get_room(db, room_id)
    query = db.query(MeterReading).filter(MeterReading.room_id == room_id)
    total = query.count()
    readings = (
        query.order_by(MeterReading.reading_year.desc(), MeterReading.reading_month.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return readings, total


def utility_status(previous: Decimal, current: Decimal | None) -> UtilityReadingStatus:
    """Usage of one utility with its display flags."""
    usage = compute_usage(previous, current)
    return UtilityReadingStatus(
        previous=previous,
        current=current,
        usage=usage,
        recorded=usage is not None,
        negative=usage is not None and usage < 0,
    )


def get_meter_sheet(db: Session, month: int, year: int) -> list[MeterSheetRow]:
    """Every room with its reading for a period and resolved previous values.

    Rooms without a reading yet are pre-filled with the values resolved
    from their latest earlier reading.
    """
    rows: list[MeterSheetRow] = []
    for room in get_rooms(db):
        reading = get_reading(db, room.id, month, year)
        resolved = resolve_previous(db, room.id, month, year)

        if reading:
            water = utility_status(reading.water_previous, reading.water_current)
            electric = utility_status(reading.electric_previous, reading.electric_current)
        else:
            water = utility_status(resolved.water_previous, None)
            electric = utility_status(resolved.electric_previous, None)

        rows.append(
            MeterSheetRow(
                room_id=room.id,
                room_number=room.room_number,
                floor_id=room.floor_id,
                floor_name=room.floor.name,
                is_occupied=room.is_occupied,
                water_calculation_type=room.water_calculation_type,
                electric_calculation_type=room.electric_calculation_type,
                reading_id=reading.id if reading else None,
                resolved_water_previous=resolved.water_previous,
                resolved_electric_previous=resolved.electric_previous,
                water=water,
                electric=electric,
            )
        )
    return rows
