"""Tenant service for business logic.

This is the only code path that changes whether a room is occupied.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy import exists
from sqlalchemy.orm import Session

from roombill.models.bill import Bill
from roombill.models.tenant import Tenant
from roombill.schemas.tenant import TenantCreate, TenantUpdate
from roombill.services.room import get_room

logger = logging.getLogger(__name__)


def _check_room_available(db: Session, room_id: int, tenant_id: int | None = None) -> None:
    """Ensure the room exists and no other active tenant lives in it."""
    get_room(db, room_id)
    query = db.query(Tenant).filter(Tenant.room_id == room_id, Tenant.is_active.is_(True))
    if tenant_id is not None:
        query = query.filter(Tenant.id != tenant_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Room already has an active tenant",
        )


def create_tenant(db: Session, tenant_data: TenantCreate) -> Tenant:
    """Create a tenant, moving them into a room when one is given."""
    if tenant_data.room_id is not None and tenant_data.is_active:
        _check_room_available(db, tenant_data.room_id)
    elif tenant_data.room_id is not None:
        get_room(db, tenant_data.room_id)

    tenant = Tenant(**tenant_data.model_dump())
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    logger.info("Created tenant %s in room %s", tenant.id, tenant.room_id)
    return tenant


def get_tenant(db: Session, tenant_id: int) -> Tenant:
    """Get a tenant by ID."""
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant not found",
        )
    return tenant


def get_tenants(db: Session, active_only: bool = False) -> list[Tenant]:
    """Get tenants, active ones first, then by name."""
    query = db.query(Tenant)
    if active_only:
        query = query.filter(Tenant.is_active.is_(True))
    return query.order_by(Tenant.is_active.desc(), Tenant.name).all()


def update_tenant(db: Session, tenant_id: int, tenant_data: TenantUpdate) -> Tenant:
    """Update a tenant. Only the fields that were sent are changed."""
    tenant = get_tenant(db, tenant_id)

    update_data = tenant_data.model_dump(exclude_unset=True)
    if update_data.get("name", "") is None:
        del update_data["name"]
    room_id = update_data.get("room_id", tenant.room_id)
    is_active = update_data.get("is_active", tenant.is_active)
    if is_active is None:
        is_active = tenant.is_active
        update_data.pop("is_active")

    if room_id is not None and is_active:
        _check_room_available(db, room_id, tenant_id)
    elif room_id is not None and room_id != tenant.room_id:
        get_room(db, room_id)

    for field, value in update_data.items():
        setattr(tenant, field, value)

    db.commit()
    db.refresh(tenant)
    return tenant


def delete_tenant(db: Session, tenant_id: int) -> None:
    """Delete a tenant, freeing their room.

    Tenants named on saved bills are kept; deactivate them instead.
    """
    tenant = get_tenant(db, tenant_id)
    if db.query(exists().where(Bill.tenant_id == tenant_id)).scalar():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Tenant has saved bills, deactivate them instead",
        )
    db.delete(tenant)
    db.commit()
    logger.info("Deleted tenant %s", tenant_id)
