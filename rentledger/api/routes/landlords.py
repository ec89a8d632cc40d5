"""Landlord API routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rentledger.core.database import get_db
from rentledger.models.enums import RentStatus
from rentledger.schemas.landlord import LandlordCreate, LandlordResponse, LandlordUpdate
from rentledger.schemas.property import PropertyResponse
from rentledger.schemas.rent import RentResponse
from rentledger.schemas.state import StateResponse
from rentledger.schemas.tenant import TenantResponse
from rentledger.services import landlord as landlord_service
from rentledger.services import property as property_service
from rentledger.services import rent_lifecycle, soft_delete, state_ledger

router = APIRouter(prefix="/landlords", tags=["landlords"])


@router.post("/", response_model=LandlordResponse, status_code=status.HTTP_201_CREATED)
def create_landlord(
    landlord_data: LandlordCreate,
    db: Session = Depends(get_db),
):
    """Create a landlord with their address."""
    return landlord_service.create_landlord(db, landlord_data)


@router.get("/", response_model=list[LandlordResponse])
def list_landlords(
    include_deleted: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """List landlords."""
    return landlord_service.get_landlords(db, include_deleted, skip, limit)


@router.get("/{landlord_id}", response_model=LandlordResponse)
def get_landlord(landlord_id: int, db: Session = Depends(get_db)):
    """Get a landlord by ID."""
    return landlord_service.get_landlord(db, landlord_id)


@router.put("/{landlord_id}", response_model=LandlordResponse)
def update_landlord(
    landlord_id: int,
    landlord_data: LandlordUpdate,
    db: Session = Depends(get_db),
):
    """Replace a landlord and their address."""
    return landlord_service.update_landlord(db, landlord_id, landlord_data)


@router.delete("/{landlord_id}", response_model=LandlordResponse)
def delete_landlord(landlord_id: int, db: Session = Depends(get_db)):
    """Soft delete a landlord who owns no visible property."""
    return soft_delete.soft_delete_landlord(db, landlord_id)


@router.post("/{landlord_id}/restore", response_model=LandlordResponse)
def restore_landlord(landlord_id: int, db: Session = Depends(get_db)):
    """Undo a soft delete."""
    return soft_delete.undelete_landlord(db, landlord_id)


@router.get("/{landlord_id}/properties", response_model=list[PropertyResponse])
def list_landlord_properties(
    landlord_id: int,
    include_deleted: bool = False,
    db: Session = Depends(get_db),
):
    """List the properties of a landlord."""
    landlord_service.get_landlord(db, landlord_id)
    return property_service.get_properties(db, landlord_id=landlord_id, include_deleted=include_deleted)


@router.get("/{landlord_id}/rents", response_model=list[RentResponse])
def list_landlord_rents(
    landlord_id: int,
    rent_status: RentStatus | None = Query(None, alias="status"),
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    """List visible rents of a landlord, optionally only ongoing or finished ones."""
    landlord_service.get_landlord(db, landlord_id)
    return rent_lifecycle.get_rents_for_landlord(db, landlord_id, as_of or date.today(), rent_status)


@router.get("/{landlord_id}/tenants", response_model=list[TenantResponse])
def list_current_tenants(
    landlord_id: int,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    """List tenants with an ongoing rent at this landlord."""
    landlord_service.get_landlord(db, landlord_id)
    return rent_lifecycle.get_current_tenants(db, landlord_id, as_of or date.today())


@router.get("/{landlord_id}/states/unconfirmed", response_model=list[StateResponse])
def list_unconfirmed_states(landlord_id: int, db: Session = Depends(get_db)):
    """List states awaiting the landlord's confirmation."""
    landlord_service.get_landlord(db, landlord_id)
    return state_ledger.get_unconfirmed_states_for_landlord(db, landlord_id)
