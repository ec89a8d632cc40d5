"""Rent API routes, including the rent's state ledger and invoices."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rentledger.core.database import get_db
from rentledger.schemas.invoice import InvoiceResponse
from rentledger.schemas.rent import RentCreate, RentResponse, RentUpdate
from rentledger.schemas.state import StateCreate, StateResponse
from rentledger.services import invoicing, soft_delete, state_ledger
from rentledger.services import rent as rent_service

router = APIRouter(prefix="/rents", tags=["rents"])


@router.post("/", response_model=RentResponse, status_code=status.HTTP_201_CREATED)
def create_rent(rent_data: RentCreate, db: Session = Depends(get_db)):
    """Create a rent together with its initial meter readings."""
    return rent_service.create_rent(db, rent_data)


@router.get("/", response_model=list[RentResponse])
def list_rents(
    include_deleted: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """List rents."""
    return rent_service.get_rents(db, include_deleted, skip, limit)


@router.get("/{rent_id}", response_model=RentResponse)
def get_rent(rent_id: int, db: Session = Depends(get_db)):
    """Get a rent by ID."""
    return rent_service.get_rent(db, rent_id)


@router.put("/{rent_id}", response_model=RentResponse)
def update_rent(
    rent_id: int,
    rent_data: RentUpdate,
    db: Session = Depends(get_db),
):
    """Replace the contract terms of a rent."""
    return rent_service.update_rent(db, rent_id, rent_data)


@router.delete("/{rent_id}", response_model=RentResponse)
def delete_rent(rent_id: int, db: Session = Depends(get_db)):
    """Soft delete a rent; its states and invoices are kept."""
    return soft_delete.soft_delete_rent(db, rent_id)


@router.post("/{rent_id}/restore", response_model=RentResponse)
def restore_rent(rent_id: int, db: Session = Depends(get_db)):
    """Undo a soft delete."""
    return soft_delete.undelete_rent(db, rent_id)


@router.get("/{rent_id}/states", response_model=list[StateResponse])
def list_states(
    rent_id: int,
    unconfirmed: bool = False,
    db: Session = Depends(get_db),
):
    """List the states of a rent in ledger order."""
    rent_service.get_rent(db, rent_id)
    if unconfirmed:
        return state_ledger.get_unconfirmed_states_for_rent(db, rent_id)
    return state_ledger.get_states_for_rent(db, rent_id)


@router.post("/{rent_id}/states", response_model=StateResponse, status_code=status.HTTP_201_CREATED)
def append_state(
    rent_id: int,
    state_data: StateCreate,
    db: Session = Depends(get_db),
):
    """Append meter readings to the rent's ledger."""
    return state_ledger.append_state(db, rent_id, state_data.to_mapping(), state_data.is_initial)


@router.get("/{rent_id}/states/latest", response_model=StateResponse)
def get_latest_state(rent_id: int, db: Session = Depends(get_db)):
    """Get the most recent state of a rent."""
    rent_service.get_rent(db, rent_id)
    return state_ledger.get_latest_state(db, rent_id)


@router.get("/{rent_id}/invoices", response_model=list[InvoiceResponse])
def list_invoices(rent_id: int, db: Session = Depends(get_db)):
    """List the invoices of a rent."""
    rent_service.get_rent(db, rent_id)
    return invoicing.get_invoices_for_rent(db, rent_id)
