"""Landlord service for business logic."""

import logging

from sqlalchemy.orm import Session

from rentledger.core.database import commit_or_conflict
from rentledger.core.errors import NotFoundError, ValidationError
from rentledger.models.address import Address
from rentledger.models.landlord import Landlord
from rentledger.schemas.landlord import LandlordCreate, LandlordUpdate

logger = logging.getLogger(__name__)


def create_landlord(db: Session, landlord_data: LandlordCreate) -> Landlord:
    """Create a landlord together with their address."""
    if get_landlord_by_email(db, landlord_data.email):
        raise ValidationError(f"Landlord with email '{landlord_data.email}' already exists")

    address = Address(**landlord_data.address.model_dump())
    db.add(address)
    db.flush()  # Get address.id

    db_landlord = Landlord(
        **landlord_data.model_dump(exclude={"address"}),
        address_id=address.id,
    )
    db.add(db_landlord)
    commit_or_conflict(db, f"Landlord with email '{landlord_data.email}' already exists")
    db.refresh(db_landlord)
    logger.info("Created landlord %s", db_landlord.id)
    return db_landlord


def get_landlord(db: Session, landlord_id: int) -> Landlord:
    """Get a landlord by ID, deleted or not."""
    db_landlord = db.query(Landlord).filter(Landlord.id == landlord_id).first()
    if not db_landlord:
        raise NotFoundError(f"Landlord {landlord_id} not found")
    return db_landlord


def get_landlord_by_email(db: Session, email: str) -> Landlord | None:
    """Get a landlord by email."""
    return db.query(Landlord).filter(Landlord.email == email).first()


def get_landlords(
    db: Session,
    include_deleted: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> list[Landlord]:
    """Get landlords with pagination; deleted ones only on request."""
    query = db.query(Landlord)
    if not include_deleted:
        query = query.filter(Landlord.is_deleted.is_(False))
    return query.order_by(Landlord.id).offset(skip).limit(limit).all()


def update_landlord(
    db: Session,
    landlord_id: int,
    landlord_data: LandlordUpdate,
) -> Landlord:
    """Replace all landlord fields and their address."""
    db_landlord = get_landlord(db, landlord_id)
    if db_landlord.is_deleted:
        raise ValidationError(f"Landlord {landlord_id} is deleted")

    other = get_landlord_by_email(db, landlord_data.email)
    if other and other.id != landlord_id:
        raise ValidationError(f"Landlord with email '{landlord_data.email}' already exists")

    for field, value in landlord_data.model_dump(exclude={"address"}).items():
        setattr(db_landlord, field, value)

    address = db.get(Address, db_landlord.address_id)
    if not address:
        raise NotFoundError(f"Address of landlord {landlord_id} not found")
    for field, value in landlord_data.address.model_dump().items():
        setattr(address, field, value)

    commit_or_conflict(db, f"Landlord with email '{landlord_data.email}' already exists")
    db.refresh(db_landlord)
    logger.info("Updated landlord %s", landlord_id)
    return db_landlord
