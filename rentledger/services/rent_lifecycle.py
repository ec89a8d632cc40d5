"""Rent lifecycle: ongoing or finished relative to a given day."""

from datetime import date

from sqlalchemy.orm import Session

from rentledger.core.errors import ValidationError
from rentledger.models.enums import RentStatus
from rentledger.models.rent import Rent
from rentledger.models.tenant import Tenant


def is_ongoing(rent: Rent, as_of: date) -> bool:
    """A rent is ongoing up to and including its end day."""
    return rent.end_rent >= as_of


def is_finished(rent: Rent, as_of: date) -> bool:
    return not is_ongoing(rent, as_of)


def in_range(rent: Rent, start: date, end: date) -> bool:
    """Whether the rent period overlaps ``start``..``end`` (both inclusive)."""
    return rent.start_rent <= end and rent.end_rent >= start


def classify(rent: Rent, as_of: date) -> RentStatus:
    return RentStatus.ONGOING if is_ongoing(rent, as_of) else RentStatus.FINISHED


def _status_filter(query, status: RentStatus | None, as_of: date):
    if status == RentStatus.ONGOING:
        return query.filter(Rent.end_rent >= as_of)
    if status == RentStatus.FINISHED:
        return query.filter(Rent.end_rent < as_of)
    return query


def get_rents_for_tenant(
    db: Session,
    tenant_id: int,
    as_of: date,
    status: RentStatus | None = None,
) -> list[Rent]:
    """Visible rents of a tenant, optionally only ongoing or finished ones."""
    query = db.query(Rent).filter(Rent.tenant_id == tenant_id, Rent.is_deleted.is_(False))
    return _status_filter(query, status, as_of).order_by(Rent.start_rent, Rent.id).all()


def get_rents_for_landlord(
    db: Session,
    landlord_id: int,
    as_of: date,
    status: RentStatus | None = None,
) -> list[Rent]:
    """Visible rents of a landlord, optionally only ongoing or finished ones."""
    query = db.query(Rent).filter(Rent.landlord_id == landlord_id, Rent.is_deleted.is_(False))
    return _status_filter(query, status, as_of).order_by(Rent.start_rent, Rent.id).all()


def get_rents_between(db: Session, tenant_id: int, start: date, end: date) -> list[Rent]:
    """Visible rents of a tenant whose period overlaps the given dates."""
    if start > end:
        raise ValidationError("start must not be after end")
    return (
        db.query(Rent)
        .filter(
            Rent.tenant_id == tenant_id,
            Rent.is_deleted.is_(False),
            Rent.start_rent <= end,
            Rent.end_rent >= start,
        )
        .order_by(Rent.start_rent, Rent.id)
        .all()
    )


def get_current_tenants(db: Session, landlord_id: int, as_of: date) -> list[Tenant]:
    """Visible tenants holding an ongoing rent with the landlord."""
    return (
        db.query(Tenant)
        .join(Rent, Rent.tenant_id == Tenant.id)
        .filter(
            Rent.landlord_id == landlord_id,
            Rent.is_deleted.is_(False),
            Rent.end_rent >= as_of,
            Tenant.is_deleted.is_(False),
        )
        .distinct()
        .order_by(Tenant.id)
        .all()
    )
