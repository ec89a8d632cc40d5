"""Rent service for business logic."""

import logging

from sqlalchemy.orm import Session

from rentledger.core.database import commit_or_conflict
from rentledger.core.errors import NotFoundError, ValidationError
from rentledger.models.rent import Rent
from rentledger.schemas.rent import RentCreate, RentUpdate
from rentledger.services.landlord import get_landlord
from rentledger.services.property import get_property
from rentledger.services.state_ledger import add_state
from rentledger.services.tenant import get_tenant

logger = logging.getLogger(__name__)


def create_rent(db: Session, rent_data: RentCreate) -> Rent:
    """Create a rent together with its initial state.

    The contract and its opening meter readings are committed together.
    """
    landlord = get_landlord(db, rent_data.landlord_id)
    tenant = get_tenant(db, rent_data.tenant_id)
    db_property = get_property(db, rent_data.property_id)

    try:
        for entity, label in ((landlord, "Landlord"), (tenant, "Tenant"), (db_property, "Property")):
            if entity.is_deleted:
                raise ValidationError(f"{label} {entity.id} is deleted")
        if db_property.landlord_id != landlord.id:
            raise ValidationError(f"Property {db_property.id} does not belong to landlord {landlord.id}")

        db_rent = Rent(**rent_data.model_dump(exclude={"initial_readings"}))
        db.add(db_rent)
        db.flush()  # Get rent.id

        add_state(db, db_rent, rent_data.initial_readings.to_mapping(), is_initial=True)
    except ValidationError as exc:
        db.rollback()
        logger.warning("Rejected rent for property %s: %s", rent_data.property_id, exc.message)
        raise

    commit_or_conflict(db, f"Initial state of rent for property {rent_data.property_id} already exists")
    db.refresh(db_rent)
    logger.info(
        "Created rent %s for property %s and tenant %s",
        db_rent.id,
        db_rent.property_id,
        db_rent.tenant_id,
    )
    return db_rent


def get_rent(db: Session, rent_id: int) -> Rent:
    """Get a rent by ID, deleted or not."""
    db_rent = db.query(Rent).filter(Rent.id == rent_id).first()
    if not db_rent:
        raise NotFoundError(f"Rent {rent_id} not found")
    return db_rent


def get_rents(
    db: Session,
    include_deleted: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> list[Rent]:
    """Get rents with pagination; deleted ones only on request."""
    query = db.query(Rent)
    if not include_deleted:
        query = query.filter(Rent.is_deleted.is_(False))
    return query.order_by(Rent.id).offset(skip).limit(limit).all()


def get_rents_for_property(db: Session, property_id: int) -> list[Rent]:
    """All rents of a property, including deleted ones."""
    return db.query(Rent).filter(Rent.property_id == property_id).order_by(Rent.id).all()


def update_rent(db: Session, rent_id: int, rent_data: RentUpdate) -> Rent:
    """Replace all scalar rent fields; the parties and property stay fixed."""
    db_rent = get_rent(db, rent_id)
    if db_rent.is_deleted:
        raise ValidationError(f"Rent {rent_id} is deleted")

    for field, value in rent_data.model_dump().items():
        setattr(db_rent, field, value)

    db.commit()
    db.refresh(db_rent)
    logger.info("Updated rent %s", rent_id)
    return db_rent
