"""Bill generation and the bill record store."""

import logging
from datetime import date
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy import and_, exists, or_
from sqlalchemy.orm import Session

from roombill.core.config import settings
from roombill.core.exceptions import BillingConfigurationError
from roombill.models.bill import Bill
from roombill.models.floor import Floor
from roombill.models.meter_reading import MeterReading
from roombill.models.room import Room
from roombill.schemas.billing import (
    BillGenerationError,
    BillGenerationResult,
    BillSave,
    GeneratedBill,
    MeteredUnits,
    RoomPricing,
)
from roombill.services.calculator import compute_bill, line_item_total, to_money
from roombill.services.readings import get_reading
from roombill.services.room import get_room, occupied_clause
from roombill.services.settings import get_rate_settings

logger = logging.getLogger(__name__)


def make_invoice_no(room_number: str, month: int, year: int) -> str:
    """Invoice number of a room's bill, e.g. INV-6901-101 for January 2026."""
    short_year = (year + settings.INVOICE_YEAR_OFFSET) % 100
    return f"{settings.INVOICE_PREFIX}-{short_year:02d}{month:02d}-{room_number}"


def get_billable_rooms(db: Session, month: int, year: int) -> list[Room]:
    """Rooms that get a bill: those read this period and those occupied.

    Occupied rooms without a reading are still billed, with zero usage,
    so that a missed meter round shows up on the bills.
    """
    has_reading = exists().where(
        MeterReading.room_id == Room.id,
        MeterReading.reading_month == month,
        MeterReading.reading_year == year,
    )
    return (
        db.query(Room)
        .join(Room.floor)
        .filter(or_(has_reading, occupied_clause()))
        .order_by(Floor.sort_order, Room.room_number)
        .all()
    )


def _metered_units(reading: MeterReading | None) -> MeteredUnits:
    if reading is None:
        return MeteredUnits()
    return MeteredUnits(
        water_units=reading.water_usage or Decimal("0"),
        electric_units=reading.electric_usage or Decimal("0"),
    )


def generate_bills(db: Session, month: int, year: int) -> BillGenerationResult:
    """Compute the bills of a period without saving them.

    A room whose pricing cannot be billed is reported under `errors`; the
    other rooms are still billed.
    """
    rates = get_rate_settings(db)
    bills: list[GeneratedBill] = []
    errors: list[BillGenerationError] = []

    for room in get_billable_rooms(db, month, year):
        reading = get_reading(db, room.id, month, year)
        try:
            items = compute_bill(
                RoomPricing.model_validate(room),
                rates,
                _metered_units(reading),
            )
        except BillingConfigurationError as exc:
            logger.error("Cannot bill room %s: %s", room.room_number, exc.message)
            errors.append(
                BillGenerationError(
                    room_id=room.id,
                    room_number=room.room_number,
                    detail=exc.message,
                )
            )
            continue

        for warning in items.warnings:
            logger.warning("Room %s %d/%d: %s", room.room_number, month, year, warning)

        tenant = room.active_tenant
        bills.append(
            GeneratedBill(
                **items.model_dump(),
                room_id=room.id,
                room_number=room.room_number,
                floor_name=room.floor.name,
                is_occupied=room.is_occupied,
                tenant_id=tenant.id if tenant else None,
                tenant_name=tenant.name if tenant else None,
                tenant_phone=tenant.phone if tenant else None,
                invoice_no=make_invoice_no(room.room_number, month, year),
                bill_month=month,
                bill_year=year,
                water_previous=reading.water_previous if reading else None,
                water_current=reading.water_current if reading else None,
                electric_previous=reading.electric_previous if reading else None,
                electric_current=reading.electric_current if reading else None,
            )
        )

    return BillGenerationResult(bill_month=month, bill_year=year, bills=bills, errors=errors)


def get_bill(db: Session, bill_id: int) -> Bill:
    """Get a saved bill by ID."""
    bill = db.query(Bill).filter(Bill.id == bill_id).first()
    if not bill:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bill not found",
        )
    return bill


def get_bill_for_period(db: Session, room_id: int, month: int, year: int) -> Bill | None:
    """Get the saved bill of a room for a period, if any."""
    return (
        db.query(Bill)
        .filter(
            and_(
                Bill.room_id == room_id,
                Bill.bill_month == month,
                Bill.bill_year == year,
            )
        )
        .first()
    )


def get_bills_for_period(db: Session, month: int, year: int) -> list[Bill]:
    """Get the saved bills of a period in building order."""
    return (
        db.query(Bill)
        .join(Bill.room)
        .join(Room.floor)
        .filter(Bill.bill_month == month, Bill.bill_year == year)
        .order_by(Floor.sort_order, Room.room_number)
        .all()
    )


MONEY_FIELDS = ("room_price", "water_amount", "electric_amount", "trash_fee", "other_amount")


def _rounded_line_items(data: BillSave) -> BillSave:
    """Round every money line item to cents, as it will be stored."""
    return data.model_copy(update={f: to_money(getattr(data, f)) for f in MONEY_FIELDS})


def _checked_total(data: BillSave) -> Decimal:
    expected = line_item_total(
        data.room_price,
        data.water_amount,
        data.electric_amount,
        data.trash_fee,
        data.other_amount,
    )
    if data.total_amount is not None and to_money(data.total_amount) != expected:
        logger.warning(
            "Rejected bill for room %s %d/%d: total %s, line items add up to %s",
            data.room_id,
            data.bill_month,
            data.bill_year,
            data.total_amount,
            expected,
        )
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Bill total does not match its line items",
        )
    return expected


def store_bill(db: Session, data: BillSave, total_amount: Decimal) -> tuple[Bill, bool]:
    """Insert or fully replace the bill of (room, month, year).

    Writes the given total as-is; callers are responsible for it.
    """
    bill = get_bill_for_period(db, data.room_id, data.bill_month, data.bill_year)
    created = bill is None
    if created:
        bill = Bill(
            room_id=data.room_id,
            bill_month=data.bill_month,
            bill_year=data.bill_year,
        )
        db.add(bill)

    fields = data.model_dump(exclude={"room_id", "bill_month", "bill_year", "total_amount"})
    for field, value in fields.items():
        setattr(bill, field, value)
    bill.total_amount = total_amount
    return bill, created


def save_bill(db: Session, data: BillSave) -> tuple[Bill, bool]:
    """Save a bill after checking that its total adds up.

    Line items are rounded to cents first. A missing total is computed
    from them; a total that disagrees with them is rejected.
    """
    room = get_room(db, data.room_id)
    data = _rounded_line_items(data)
    total = _checked_total(data)
    if data.invoice_no is None:
        invoice_no = make_invoice_no(room.room_number, data.bill_month, data.bill_year)
        data = data.model_copy(update={"invoice_no": invoice_no})

    bill, created = store_bill(db, data, total)
    db.commit()
    db.refresh(bill)
    return bill, created


def persist_generated_bills(
    db: Session,
    month: int,
    year: int,
) -> tuple[list[Bill], BillGenerationResult]:
    """Generate the bills of a period and save all of them.

    Regenerating overwrites earlier snapshots, manual edits included.
    """
    result = generate_bills(db, month, year)
    saved: list[Bill] = []
    for generated in result.bills:
        data = BillSave(
            room_id=generated.room_id,
            bill_month=month,
            bill_year=year,
            tenant_id=generated.tenant_id,
            invoice_no=generated.invoice_no,
            room_price=generated.room_price,
            water_type=generated.water_type,
            water_units=generated.water_units,
            water_rate=generated.water_rate,
            water_amount=generated.water_amount,
            electric_type=generated.electric_type,
            electric_units=generated.electric_units,
            electric_rate=generated.electric_rate,
            electric_amount=generated.electric_amount,
            trash_fee=generated.trash_fee,
            other_amount=generated.other_amount,
        )
        bill, _ = store_bill(db, data, generated.total_amount)
        saved.append(bill)

    db.commit()
    for bill in saved:
        db.refresh(bill)
    logger.info("Saved %d bills for %d/%d", len(saved), month, year)
    return saved, result


def mark_bill_paid(db: Session, bill_id: int, paid_date: date | None = None) -> Bill:
    """Mark a bill as paid, today unless another date is given."""
    bill = get_bill(db, bill_id)
    bill.is_paid = True
    bill.paid_date = paid_date or date.today()
    db.commit()
    db.refresh(bill)
    return bill
