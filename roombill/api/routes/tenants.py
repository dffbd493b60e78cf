"""Tenant API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from roombill.core.database import get_db
from roombill.schemas.tenant import TenantCreate, TenantResponse, TenantUpdate
from roombill.services import tenant as tenant_service

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get("/", response_model=list[TenantResponse])
def list_tenants(
    active_only: bool = Query(False, description="Only return active tenants"),
    db: Session = Depends(get_db),
):
    """List tenants, active ones first."""
    return tenant_service.get_tenants(db, active_only)


@router.post("/", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(tenant_data: TenantCreate, db: Session = Depends(get_db)):
    """Create a tenant, optionally moving them into a room."""
    return tenant_service.create_tenant(db, tenant_data)


@router.get("/{tenant_id}", response_model=TenantResponse)
def get_tenant(tenant_id: int, db: Session = Depends(get_db)):
    """Get a tenant by ID."""
    return tenant_service.get_tenant(db, tenant_id)


@router.put("/{tenant_id}", response_model=TenantResponse)
def update_tenant(tenant_id: int, tenant_data: TenantUpdate, db: Session = Depends(get_db)):
    """Update a tenant. Moving out is done by setting is_active to false."""
    return tenant_service.update_tenant(db, tenant_id, tenant_data)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tenant(tenant_id: int, db: Session = Depends(get_db)) -> None:
    """Delete a tenant."""
    tenant_service.delete_tenant(db, tenant_id)
