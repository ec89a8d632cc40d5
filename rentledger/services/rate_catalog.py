"""Rate catalog: the versioned price list of each property."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from rentledger.core.database import commit_or_conflict
from rentledger.core.errors import NotFoundError, ValidationError
from rentledger.models.rate import Rate
from rentledger.schemas.rate import RateUpdate
from rentledger.services.property import get_property

logger = logging.getLogger(__name__)


def get_active_rate(db: Session, property_id: int) -> Rate | None:
    """Return the rate currently in force for a property, if it has one."""
    return (
        db.query(Rate)
        .filter(Rate.property_id == property_id, Rate.is_active.is_(True))
        .first()
    )


def get_current_rate(db: Session, property_id: int) -> Rate:
    """Return the active rate of an existing property.

    Raises NotFoundError when the property does not exist or has no rate yet.
    """
    get_property(db, property_id)
    rate = get_active_rate(db, property_id)
    if not rate:
        raise NotFoundError(f"Property {property_id} has no rate")
    return rate


def get_rate(db: Session, rate_id: int) -> Rate:
    """Get one rate version by ID."""
    rate = db.query(Rate).filter(Rate.id == rate_id).first()
    if not rate:
        raise NotFoundError(f"Rate {rate_id} not found")
    return rate


def get_rate_history(db: Session, property_id: int) -> list[Rate]:
    """All rate versions of a property, newest first."""
    get_property(db, property_id)
    return (
        db.query(Rate)
        .filter(Rate.property_id == property_id)
        .order_by(Rate.id.desc())
        .all()
    )


def set_rate(db: Session, property_id: int, rate_data: RateUpdate) -> Rate:
    """Publish a new rate version and supersede the active one.

    Every utility the property has must be priced. The previous version is
    kept so states captured under it are still billed with its prices.
    """
    db_property = get_property(db, property_id)
    if db_property.is_deleted:
        raise ValidationError(f"Property {property_id} is deleted")

    rate = Rate(property_id=property_id, **rate_data.model_dump())
    missing = [c.value for c in rate.get_unpriced(db_property.get_utilities())]
    if missing:
        logger.warning("Rejected rate for property %s: no price for %s", property_id, missing)
        raise ValidationError(f"Rate has no price for {', '.join(missing)}")

    current = get_active_rate(db, property_id)
    if current:
        current.is_active = False
        current.superseded_at = datetime.now(UTC)
        db.flush()  # Free the active slot before inserting

    db.add(rate)
    commit_or_conflict(db, f"Rate of property {property_id} was changed concurrently")
    db.refresh(rate)
    logger.info(
        "Published rate %s for property %s (superseded %s)",
        rate.id,
        property_id,
        current.id if current else None,
    )
    return rate
