"""Property service for business logic."""

import logging

from sqlalchemy.orm import Session

from rentledger.core.errors import NotFoundError, ValidationError
from rentledger.models.address import Address
from rentledger.models.property import Property
from rentledger.models.rate import Rate
from rentledger.schemas.property import PropertyCreate, PropertyUpdate
from rentledger.services.landlord import get_landlord

logger = logging.getLogger(__name__)


def create_property(db: Session, property_data: PropertyCreate) -> Property:
    """Create a new property with its address."""
    landlord = get_landlord(db, property_data.landlord_id)
    if landlord.is_deleted:
        raise ValidationError(f"Landlord {landlord.id} is deleted")

    address = Address(**property_data.address.model_dump())
    db.add(address)
    db.flush()  # Get address.id

    db_property = Property(
        **property_data.model_dump(exclude={"address"}),
        address_id=address.id,
    )
    db.add(db_property)

    db.commit()
    db.refresh(db_property)
    logger.info("Created property %s for landlord %s", db_property.id, landlord.id)
    return db_property


def get_property(db: Session, property_id: int) -> Property:
    """Get a property by ID, deleted or not."""
    db_property = db.query(Property).filter(Property.id == property_id).first()
    if not db_property:
        raise NotFoundError(f"Property {property_id} not found")
    return db_property


def get_property_address(db: Session, db_property: Property) -> Address:
    """Get the address owned by a property."""
    address = db.get(Address, db_property.address_id)
    if not address:
        raise NotFoundError(f"Address of property {db_property.id} not found")
    return address


def get_properties(
    db: Session,
    landlord_id: int | None = None,
    include_deleted: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> list[Property]:
    """Get properties with pagination, optionally only those of one landlord."""
    query = db.query(Property)
    if landlord_id is not None:
        query = query.filter(Property.landlord_id == landlord_id)
    if not include_deleted:
        query = query.filter(Property.is_deleted.is_(False))
    return query.order_by(Property.id).offset(skip).limit(limit).all()


def update_property(
    db: Session,
    property_id: int,
    property_data: PropertyUpdate,
) -> Property:
    """Replace all scalar property fields and its address.

    A utility can only be switched on when the active rate prices it, so a
    new rate has to be published first.
    """
    db_property = get_property(db, property_id)
    if db_property.is_deleted:
        raise ValidationError(f"Property {property_id} is deleted")

    for field, value in property_data.model_dump(exclude={"address"}).items():
        setattr(db_property, field, value)

    rate = (
        db.query(Rate)
        .filter(Rate.property_id == property_id, Rate.is_active.is_(True))
        .first()
    )
    unpriced = [c.value for c in rate.get_unpriced(db_property.get_utilities())] if rate else []
    if unpriced:
        rate_id = rate.id
        db.rollback()
        logger.warning(
            "Rejected update of property %s: rate %s has no price for %s", property_id, rate_id, unpriced
        )
        raise ValidationError(f"Rate {rate_id} has no price for {', '.join(unpriced)}")

    address = get_property_address(db, db_property)
    for field, value in property_data.address.model_dump().items():
        setattr(address, field, value)

    db.commit()
    db.refresh(db_property)
    logger.info("Updated property %s", property_id)
    return db_property
