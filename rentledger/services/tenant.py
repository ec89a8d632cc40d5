"""Tenant service for business logic."""

import logging

from sqlalchemy.orm import Session

from rentledger.core.database import commit_or_conflict
from rentledger.core.errors import NotFoundError, ValidationError
from rentledger.models.address import Address
from rentledger.models.tenant import Tenant
from rentledger.schemas.tenant import TenantCreate, TenantUpdate

logger = logging.getLogger(__name__)


def create_tenant(db: Session, tenant_data: TenantCreate) -> Tenant:
    """Create a tenant together with their address."""
    if get_tenant_by_email(db, tenant_data.email):
        raise ValidationError(f"Tenant with email '{tenant_data.email}' already exists")

    address = Address(**tenant_data.address.model_dump())
    db.add(address)
    db.flush()  # Get address.id

    db_tenant = Tenant(
        **tenant_data.model_dump(exclude={"address"}),
        address_id=address.id,
    )
    db.add(db_tenant)
    commit_or_conflict(db, f"Tenant with email '{tenant_data.email}' already exists")
    db.refresh(db_tenant)
    logger.info("Created tenant %s", db_tenant.id)
    return db_tenant


def get_tenant(db: Session, tenant_id: int) -> Tenant:
    """Get a tenant by ID, deleted or not."""
    db_tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not db_tenant:
        raise NotFoundError(f"Tenant {tenant_id} not found")
    return db_tenant


def get_tenant_by_email(db: Session, email: str) -> Tenant | None:
    """Get a tenant by email."""
    return db.query(Tenant).filter(Tenant.email == email).first()


def get_tenants(
    db: Session,
    include_deleted: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> list[Tenant]:
    """Get tenants with pagination; deleted ones only on request."""
    query = db.query(Tenant)
    if not include_deleted:
        query = query.filter(Tenant.is_deleted.is_(False))
    return query.order_by(Tenant.id).offset(skip).limit(limit).all()


def update_tenant(db: Session, tenant_id: int, tenant_data: TenantUpdate) -> Tenant:
    """Replace all tenant fields and their address."""
    db_tenant = get_tenant(db, tenant_id)
    if db_tenant.is_deleted:
        raise ValidationError(f"Tenant {tenant_id} is deleted")

    other = get_tenant_by_email(db, tenant_data.email)
    if other and other.id != tenant_id:
        raise ValidationError(f"Tenant with email '{tenant_data.email}' already exists")

    for field, value in tenant_data.model_dump(exclude={"address"}).items():
        setattr(db_tenant, field, value)

    address = db.get(Address, db_tenant.address_id)
    if not address:
        raise NotFoundError(f"Address of tenant {tenant_id} not found")
    for field, value in tenant_data.address.model_dump().items():
        setattr(address, field, value)

    commit_or_conflict(db, f"Tenant with email '{tenant_data.email}' already exists")
    db.refresh(db_tenant)
    logger.info("Updated tenant %s", tenant_id)
    return db_tenant
