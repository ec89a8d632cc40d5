"""Tenant Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from rentledger.schemas.address import AddressCreate
from rentledger.schemas.party import PartyBase


class TenantCreate(PartyBase):
    """Schema for creating a tenant together with their address."""

    landlord_comment: str | None = Field(default=None, max_length=255)
    address: AddressCreate


class TenantUpdate(TenantCreate):
    """Schema for replacing all tenant fields."""


class TenantResponse(BaseModel):
    """Schema for tenant response."""

    id: int
    name: str | None
    surname: str | None
    is_company: bool
    company_name: str | None
    nip: str | None
    pesel: str | None
    regon: str | None
    phone_prefix: str | None
    phone_number: str | None
    bank_account: str | None
    email: str
    landlord_comment: str | None
    identity_subject: str | None
    address_id: int
    created_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}
