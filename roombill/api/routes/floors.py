"""Floor API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from roombill.core.database import get_db
from roombill.schemas.floor import FloorCreate, FloorResponse, FloorUpdate, FloorWithRooms
from roombill.services import floor as floor_service
from roombill.services.room import room_to_response

router = APIRouter(prefix="/floors", tags=["floors"])


@router.get("/", response_model=list[FloorResponse])
def list_floors(db: Session = Depends(get_db)):
    """List all floors in building order."""
    return floor_service.get_floors(db)


@router.post("/", response_model=FloorResponse, status_code=status.HTTP_201_CREATED)
def create_floor(floor_data: FloorCreate, db: Session = Depends(get_db)):
    """Create a new floor."""
    return floor_service.create_floor(db, floor_data)


@router.get("/{floor_id}/rooms", response_model=FloorWithRooms)
def get_floor_with_rooms(floor_id: int, db: Session = Depends(get_db)) -> FloorWithRooms:
    """Get a floor together with its rooms."""
    floor = floor_service.get_floor(db, floor_id)
    return FloorWithRooms(
        id=floor.id,
        name=floor.name,
        sort_order=floor.sort_order,
        created_at=floor.created_at,
        rooms=[room_to_response(room) for room in floor.rooms],
    )


@router.put("/{floor_id}", response_model=FloorResponse)
def update_floor(floor_id: int, floor_data: FloorUpdate, db: Session = Depends(get_db)):
    """Update a floor."""
    return floor_service.update_floor(db, floor_id, floor_data)


@router.delete("/{floor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_floor(floor_id: int, db: Session = Depends(get_db)) -> None:
    """Delete a floor that has no rooms."""
    floor_service.delete_floor(db, floor_id)
