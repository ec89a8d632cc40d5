"""Tenant API routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rentledger.core.database import get_db
from rentledger.models.enums import RentStatus
from rentledger.schemas.rent import RentResponse
from rentledger.schemas.tenant import TenantCreate, TenantResponse, TenantUpdate
from rentledger.services import rent_lifecycle, soft_delete
from rentledger.services import tenant as tenant_service

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.post("/", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(tenant_data: TenantCreate, db: Session = Depends(get_db)):
    """Create a tenant with their address."""
    return tenant_service.create_tenant(db, tenant_data)


@router.get("/", response_model=list[TenantResponse])
def list_tenants(
    include_deleted: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """List tenants."""
    return tenant_service.get_tenants(db, include_deleted, skip, limit)


@router.get("/{tenant_id}", response_model=TenantResponse)
def get_tenant(tenant_id: int, db: Session = Depends(get_db)):
    """Get a tenant by ID."""
    return tenant_service.get_tenant(db, tenant_id)


@router.put("/{tenant_id}", response_model=TenantResponse)
def update_tenant(
    tenant_id: int,
    tenant_data: TenantUpdate,
    db: Session = Depends(get_db),
):
    """Replace a tenant and their address."""
    return tenant_service.update_tenant(db, tenant_id, tenant_data)


@router.delete("/{tenant_id}", response_model=TenantResponse)
def delete_tenant(
    tenant_id: int,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    """Soft delete a tenant without an ongoing rent (as of today by default)."""
    return soft_delete.soft_delete_tenant(db, tenant_id, as_of or date.today())


@router.post("/{tenant_id}/restore", response_model=TenantResponse)
def restore_tenant(tenant_id: int, db: Session = Depends(get_db)):
    """Undo a soft delete."""
    return soft_delete.undelete_tenant(db, tenant_id)


@router.get("/{tenant_id}/rents", response_model=list[RentResponse])
def list_tenant_rents(
    tenant_id: int,
    rent_status: RentStatus | None = Query(None, alias="status"),
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    """List visible rents of a tenant, optionally only ongoing or finished ones."""
    tenant_service.get_tenant(db, tenant_id)
    return rent_lifecycle.get_rents_for_tenant(db, tenant_id, as_of or date.today(), rent_status)


@router.get("/{tenant_id}/rents/between", response_model=list[RentResponse])
def list_tenant_rents_between(
    tenant_id: int,
    start: date = Query(..., description="First day of the range"),
    end: date = Query(..., description="Last day of the range"),
    db: Session = Depends(get_db),
):
    """List rents of a tenant overlapping a date range."""
    tenant_service.get_tenant(db, tenant_id)
    return rent_lifecycle.get_rents_between(db, tenant_id, start, end)
