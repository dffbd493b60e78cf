"""Room service for business logic."""

import logging

from fastapi import HTTPException, status
from sqlalchemy import exists
from sqlalchemy.orm import Session

from roombill.models.bill import Bill
from roombill.models.floor import Floor
from roombill.models.room import Room
from roombill.models.tenant import Tenant
from roombill.schemas.room import RoomCreate, RoomResponse, RoomUpdate
from roombill.services.floor import get_floor

logger = logging.getLogger(__name__)


def occupied_clause():
    """SQL expression that is true for rooms with an active tenant."""
    return exists().where(Tenant.room_id == Room.id, Tenant.is_active.is_(True))


def _check_room_number_free(db: Session, room_number: str, room_id: int | None = None) -> None:
    query = db.query(Room).filter(Room.room_number == room_number)
    if room_id is not None:
        query = query.filter(Room.id != room_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Room number '{room_number}' already exists",
        )


def create_room(db: Session, room_data: RoomCreate) -> Room:
    """Create a new room on an existing floor."""
    get_floor(db, room_data.floor_id)
    _check_room_number_free(db, room_data.room_number)

    room = Room(**room_data.model_dump())
    db.add(room)
    db.commit()
    db.refresh(room)
    logger.info("Created room %s on floor %s", room.room_number, room.floor_id)
    return room


def get_room(db: Session, room_id: int) -> Room:
    """Get a room by ID."""
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Room not found",
        )
    return room


def get_rooms(db: Session, occupied: bool | None = None) -> list[Room]:
    """Get all rooms ordered by floor and room number."""
    query = db.query(Room).join(Room.floor)
    if occupied is not None:
        query = query.filter(occupied_clause() if occupied else ~occupied_clause())
    return query.order_by(Floor.sort_order, Room.room_number).all()


def update_room(db: Session, room_id: int, room_data: RoomUpdate) -> Room:
    """Update a room's placement or pricing."""
    room = get_room(db, room_id)

    update_data = room_data.model_dump(exclude_unset=True, exclude_none=True)
    if "floor_id" in update_data:
        get_floor(db, update_data["floor_id"])
    if "room_number" in update_data:
        _check_room_number_free(db, update_data["room_number"], room_id)

    for field, value in update_data.items():
        setattr(room, field, value)

    db.commit()
    db.refresh(room)
    return room


def delete_room(db: Session, room_id: int) -> None:
    """Delete a room.

    Blocked while a tenant lives in it or bills exist for it. Readings are
    deleted with the room and former tenants lose their room reference.
    """
    room = get_room(db, room_id)
    if room.is_occupied:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room has an active tenant",
        )
    if db.query(exists().where(Bill.room_id == room_id)).scalar():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room has saved bills",
        )

    for tenant in room.tenants:
        tenant.room_id = None
    db.delete(room)
    db.commit()
    logger.info("Deleted room %s", room.room_number)


def room_to_response(room: Room) -> RoomResponse:
    """Convert a Room model to a response joined with floor and tenant."""
    tenant = room.active_tenant
    return RoomResponse(
        id=room.id,
        floor_id=room.floor_id,
        floor_name=room.floor_name,
        room_number=room.room_number,
        room_price=room.room_price,
        water_calculation_type=room.water_calculation_type,
        water_fixed_amount=room.water_fixed_amount,
        electric_calculation_type=room.electric_calculation_type,
        electric_fixed_amount=room.electric_fixed_amount,
        is_occupied=room.is_occupied,
        tenant_id=tenant.id if tenant else None,
        tenant_name=tenant.name if tenant else None,
        tenant_phone=tenant.phone if tenant else None,
        created_at=room.created_at,
    )
