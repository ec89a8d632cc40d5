"""Address Pydantic schemas for request/response validation."""

from pydantic import BaseModel, Field


class AddressBase(BaseModel):
    """Base address schema."""

    country: str = Field(min_length=3, max_length=45)
    city: str = Field(min_length=3, max_length=45)
    street: str = Field(min_length=3, max_length=100)
    building_number: str = Field(min_length=1, max_length=10)
    flat_number: str | None = Field(default=None, min_length=1, max_length=10)
    postal_code: str = Field(min_length=1, max_length=16)


class AddressCreate(AddressBase):
    """Schema for an address created together with its owner."""


class AddressResponse(AddressBase):
    """Schema for address response."""

    id: int
    is_deleted: bool

    model_config = {"from_attributes": True}
