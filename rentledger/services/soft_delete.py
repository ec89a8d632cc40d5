"""Soft delete and restore of aggregate roots.

Deleting only flips ``is_deleted`` flags so invoices keep every row they
refer to. Each operation is idempotent and has an exact inverse.
"""

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from rentledger.core.errors import ValidationError
from rentledger.models.address import Address
from rentledger.models.landlord import Landlord
from rentledger.models.property import Property
from rentledger.models.rent import Rent
from rentledger.models.tenant import Tenant
from rentledger.services.landlord import get_landlord
from rentledger.services.property import get_property, get_property_address
from rentledger.services.rent import get_rent, get_rents_for_property
from rentledger.services.tenant import get_tenant

logger = logging.getLogger(__name__)


@dataclass
class PropertyAggregate:
    """A property with the rows that share its lifecycle."""

    property: Property
    address: Address
    rents: list[Rent]


def load_property_aggregate(db: Session, property_id: int) -> PropertyAggregate:
    """Load a property, its address and its rents; NotFoundError if missing."""
    db_property = get_property(db, property_id)
    return PropertyAggregate(
        property=db_property,
        address=get_property_address(db, db_property),
        rents=get_rents_for_property(db, property_id),
    )


def _set_property_deleted(db: Session, property_id: int, deleted: bool) -> Property:
    aggregate = load_property_aggregate(db, property_id)
    if aggregate.property.is_deleted != deleted or aggregate.address.is_deleted != deleted:
        # Rents keep their own flag
        aggregate.property.is_deleted = deleted
        aggregate.address.is_deleted = deleted
        db.commit()
        logger.info("%s property %s", "Deleted" if deleted else "Restored", property_id)
    db.refresh(aggregate.property)
    return aggregate.property


def soft_delete_property(db: Session, property_id: int) -> Property:
    return _set_property_deleted(db, property_id, True)


def undelete_property(db: Session, property_id: int) -> Property:
    return _set_property_deleted(db, property_id, False)


def _set_rent_deleted(db: Session, rent_id: int, deleted: bool) -> Rent:
    rent = get_rent(db, rent_id)
    if rent.is_deleted != deleted:
        rent.is_deleted = deleted
        db.commit()
        db.refresh(rent)
        logger.info("%s rent %s", "Deleted" if deleted else "Restored", rent_id)
    return rent


def soft_delete_rent(db: Session, rent_id: int) -> Rent:
    """Hide a rent; its states and invoices are left untouched."""
    return _set_rent_deleted(db, rent_id, True)


def undelete_rent(db: Session, rent_id: int) -> Rent:
    return _set_rent_deleted(db, rent_id, False)


def _set_party_deleted(db: Session, party: Landlord | Tenant, deleted: bool) -> None:
    address = db.get(Address, party.address_id)
    if party.is_deleted == deleted and (address is None or address.is_deleted == deleted):
        return
    party.is_deleted = deleted
    if address is not None:
        address.is_deleted = deleted
    db.commit()
    db.refresh(party)
    logger.info(
        "%s %s %s",
        "Deleted" if deleted else "Restored",
        type(party).__name__.lower(),
        party.id,
    )


def soft_delete_tenant(db: Session, tenant_id: int, as_of: date) -> Tenant:
    """Hide a tenant and their address.

    Raises ValidationError while the tenant has a visible rent ongoing on
    ``as_of``.
    """
    tenant = get_tenant(db, tenant_id)
    ongoing = (
        db.query(Rent)
        .filter(
            Rent.tenant_id == tenant_id,
            Rent.is_deleted.is_(False),
            Rent.end_rent >= as_of,
        )
        .first()
    )
    if ongoing and not tenant.is_deleted:
        logger.warning("Rejected deletion of tenant %s: rent %s is ongoing", tenant_id, ongoing.id)
        raise ValidationError(f"Tenant {tenant_id} has ongoing rent {ongoing.id}")
    _set_party_deleted(db, tenant, True)
    return tenant


def undelete_tenant(db: Session, tenant_id: int) -> Tenant:
    tenant = get_tenant(db, tenant_id)
    _set_party_deleted(db, tenant, False)
    return tenant


def soft_delete_landlord(db: Session, landlord_id: int) -> Landlord:
    """Hide a landlord and their address.

    Raises ValidationError while the landlord still owns a visible property.
    """
    landlord = get_landlord(db, landlord_id)
    owned = (
        db.query(Property)
        .filter(Property.landlord_id == landlord_id, Property.is_deleted.is_(False))
        .first()
    )
    if owned and not landlord.is_deleted:
        logger.warning("Rejected deletion of landlord %s: owns property %s", landlord_id, owned.id)
        raise ValidationError(f"Landlord {landlord_id} still owns property {owned.id}")
    _set_party_deleted(db, landlord, True)
    return landlord


def undelete_landlord(db: Session, landlord_id: int) -> Landlord:
    landlord = get_landlord(db, landlord_id)
    _set_party_deleted(db, landlord, False)
    return landlord
