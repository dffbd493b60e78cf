"""Room API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from roombill.core.database import get_db
from roombill.schemas.meter_reading import MeterReadingHistory, MeterReadingResponse
from roombill.schemas.room import RoomCreate, RoomResponse, RoomUpdate
from roombill.services import readings as reading_service
from roombill.services import room as room_service

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("/", response_model=list[RoomResponse])
def list_rooms(
    occupied: bool | None = Query(None, description="Filter by derived occupancy"),
    db: Session = Depends(get_db),
) -> list[RoomResponse]:
    """List rooms with their floor and active tenant."""
    rooms = room_service.get_rooms(db, occupied=occupied)
    return [room_service.room_to_response(r) for r in rooms]


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(room_data: RoomCreate, db: Session = Depends(get_db)) -> RoomResponse:
    """Create a new room."""
    room = room_service.create_room(db, room_data)
    return room_service.room_to_response(room)


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db)) -> RoomResponse:
    """Get a room by ID."""
    return room_service.room_to_response(room_service.get_room(db, room_id))


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    room_data: RoomUpdate,
    db: Session = Depends(get_db),
) -> RoomResponse:
    """Update a room's placement or pricing."""
    room = room_service.update_room(db, room_id, room_data)
    return room_service.room_to_response(room)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(room_id: int, db: Session = Depends(get_db)) -> None:
    """Delete a room without tenants or bills."""
    room_service.delete_room(db, room_id)


@router.get("/{room_id}/readings", response_model=MeterReadingHistory)
def get_room_reading_history(
    room_id: int,
    limit: int = Query(24, ge=1, le=240),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> MeterReadingHistory:
    """Get a room's meter readings, newest period first."""
    readings, total = reading_service.get_readings_history(db, room_id, limit, offset)
    return MeterReadingHistory(
        room_id=room_id,
        readings=[MeterReadingResponse.model_validate(r) for r in readings],
        total=total,
        limit=limit,
        offset=offset,
    )
