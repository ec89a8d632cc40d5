"""Landlord Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel

from rentledger.schemas.address import AddressCreate
from rentledger.schemas.party import PartyBase


class LandlordCreate(PartyBase):
    """Schema for creating a landlord together with their address."""

    is_vat_payer: bool = False
    address: AddressCreate


class LandlordUpdate(LandlordCreate):
    """Schema for replacing all landlord fields."""


class LandlordResponse(BaseModel):
    """Schema for landlord response."""

    id: int
    name: str | None
    surname: str | None
    is_company: bool
    is_vat_payer: bool
    company_name: str | None
    nip: str | None
    pesel: str | None
    regon: str | None
    phone_prefix: str | None
    phone_number: str | None
    bank_account: str | None
    email: str
    identity_subject: str | None
    address_id: int
    created_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}
