"""Detection of derived-state inconsistencies in stored data."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from roombill.models.bill import Bill
from roombill.models.room import Room
from roombill.models.tenant import Tenant
from roombill.schemas.billing import BillTotalMismatch, ConsistencyReport, RoomTenantConflict

logger = logging.getLogger(__name__)


def find_rooms_with_multiple_tenants(db: Session) -> list[RoomTenantConflict]:
    """Rooms referenced by more than one active tenant."""
    crowded = (
        db.query(Tenant.room_id)
        .filter(Tenant.room_id.is_not(None), Tenant.is_active.is_(True))
        .group_by(Tenant.room_id)
        .having(func.count(Tenant.id) > 1)
        .subquery()
    )
    rooms = db.query(Room).filter(Room.id.in_(db.query(crowded.c.room_id))).all()
    return [
        RoomTenantConflict(
            room_id=room.id,
            room_number=room.room_number,
            tenant_ids=sorted(t.id for t in room.active_tenants),
        )
        for room in rooms
    ]


def find_bills_with_wrong_total(db: Session) -> list[BillTotalMismatch]:
    """Saved bills whose total is not the sum of their line items."""
    mismatches: list[BillTotalMismatch] = []
    for bill in db.query(Bill).order_by(Bill.bill_year, Bill.bill_month, Bill.room_id):
        expected = bill.line_item_sum()
        if bill.total_amount != expected:
            mismatches.append(
                BillTotalMismatch(
                    bill_id=bill.id,
                    room_id=bill.room_id,
                    bill_month=bill.bill_month,
                    bill_year=bill.bill_year,
                    total_amount=bill.total_amount,
                    expected_total=expected,
                )
            )
    return mismatches


def find_inconsistencies(db: Session) -> ConsistencyReport:
    """Check the invariants that the storage layer does not enforce."""
    tenant_conflicts = find_rooms_with_multiple_tenants(db)
    wrong_totals = find_bills_with_wrong_total(db)
    if tenant_conflicts or wrong_totals:
        logger.warning(
            "Consistency check: %d rooms with several active tenants, %d bills with wrong totals",
            len(tenant_conflicts),
            len(wrong_totals),
        )
    return ConsistencyReport(
        is_consistent=not (tenant_conflicts or wrong_totals),
        rooms_with_multiple_tenants=tenant_conflicts,
        bills_with_wrong_total=wrong_totals,
    )
