"""Property Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from rentledger.schemas.address import AddressCreate, AddressResponse


class PropertyBase(BaseModel):
    """Base property schema."""

    flat_label: str = Field(min_length=2, max_length=255)
    room_count: int = Field(ge=1, le=100)
    flat_size: Decimal = Field(gt=0, max_digits=8, decimal_places=2)
    has_gas: bool = False
    has_hot_water: bool = False
    has_heat: bool = False
    landlord_comment: str | None = None


class PropertyCreate(PropertyBase):
    """Schema for creating a property together with its address."""

    landlord_id: int
    address: AddressCreate


class PropertyUpdate(PropertyBase):
    """Schema for replacing all scalar property fields."""

    address: AddressCreate


class PropertyResponse(PropertyBase):
    """Schema for property response."""

    id: int
    landlord_id: int
    address_id: int
    created_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}


class PropertyWithAddressResponse(PropertyResponse):
    """Property response with its address embedded."""

    address: AddressResponse
