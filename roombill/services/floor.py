"""Floor service for business logic."""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from roombill.models.floor import Floor
from roombill.schemas.floor import FloorCreate, FloorUpdate


def create_floor(db: Session, floor_data: FloorCreate) -> Floor:
    """Create a new floor."""
    floor = Floor(name=floor_data.name, sort_order=floor_data.sort_order)
    db.add(floor)
    db.commit()
    db.refresh(floor)
    return floor


def get_floor(db: Session, floor_id: int) -> Floor:
    """Get a floor by ID."""
    floor = db.query(Floor).filter(Floor.id == floor_id).first()
    if not floor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Floor not found",
        )
    return floor


def get_floors(db: Session) -> list[Floor]:
    """Get all floors in building order."""
    return db.query(Floor).order_by(Floor.sort_order, Floor.name).all()


def update_floor(db: Session, floor_id: int, floor_data: FloorUpdate) -> Floor:
    """Update a floor."""
    floor = get_floor(db, floor_id)

    update_data = floor_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(floor, field, value)

    db.commit()
    db.refresh(floor)
    return floor


def delete_floor(db: Session, floor_id: int) -> None:
    """Delete an empty floor."""
    floor = get_floor(db, floor_id)
    if floor.rooms:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Floor still has rooms",
        )
    db.delete(floor)
    db.commit()
