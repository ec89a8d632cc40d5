"""Property API routes, including the property's rate."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rentledger.core.database import get_db
from rentledger.models.property import Property
from rentledger.schemas.address import AddressResponse
from rentledger.schemas.property import (
    PropertyCreate,
    PropertyResponse,
    PropertyUpdate,
    PropertyWithAddressResponse,
)
from rentledger.schemas.rate import RateResponse, RateUpdate
from rentledger.services import property as property_service
from rentledger.services import rate_catalog, soft_delete

router = APIRouter(prefix="/properties", tags=["properties"])


def _with_address(db: Session, db_property: Property) -> PropertyWithAddressResponse:
    address = property_service.get_property_address(db, db_property)
    return PropertyWithAddressResponse(
        **PropertyResponse.model_validate(db_property).model_dump(),
        address=AddressResponse.model_validate(address),
    )


@router.post("/", response_model=PropertyWithAddressResponse, status_code=status.HTTP_201_CREATED)
def create_property(property_data: PropertyCreate, db: Session = Depends(get_db)):
    """Create a property with its address."""
    return _with_address(db, property_service.create_property(db, property_data))


@router.get("/", response_model=list[PropertyResponse])
def list_properties(
    landlord_id: int | None = None,
    include_deleted: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """List properties."""
    return property_service.get_properties(db, landlord_id, include_deleted, skip, limit)


@router.get("/{property_id}", response_model=PropertyWithAddressResponse)
def get_property(property_id: int, db: Session = Depends(get_db)):
    """Get a property with its address."""
    return _with_address(db, property_service.get_property(db, property_id))


@router.put("/{property_id}", response_model=PropertyWithAddressResponse)
def update_property(
    property_id: int,
    property_data: PropertyUpdate,
    db: Session = Depends(get_db),
):
    """Replace a property and its address."""
    return _with_address(db, property_service.update_property(db, property_id, property_data))


@router.delete("/{property_id}", response_model=PropertyResponse)
def delete_property(property_id: int, db: Session = Depends(get_db)):
    """Soft delete a property and its address; its rents stay visible."""
    return soft_delete.soft_delete_property(db, property_id)


@router.post("/{property_id}/restore", response_model=PropertyResponse)
def restore_property(property_id: int, db: Session = Depends(get_db)):
    """Undo a soft delete."""
    return soft_delete.undelete_property(db, property_id)


@router.get("/{property_id}/rate", response_model=RateResponse)
def get_rate(property_id: int, db: Session = Depends(get_db)):
    """Get the rate currently in force."""
    return rate_catalog.get_current_rate(db, property_id)


@router.put("/{property_id}/rate", response_model=RateResponse)
def set_rate(
    property_id: int,
    rate_data: RateUpdate,
    db: Session = Depends(get_db),
):
    """Publish a new rate; states captured earlier keep their old rate."""
    return rate_catalog.set_rate(db, property_id, rate_data)


@router.get("/{property_id}/rate/history", response_model=list[RateResponse])
def get_rate_history(property_id: int, db: Session = Depends(get_db)):
    """List all rate versions, newest first."""
    return rate_catalog.get_rate_history(db, property_id)
