"""Rate Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class RateBase(BaseModel):
    """Prices, subscriptions and VAT rates of a property.

    Prices of utilities the property does not have may be omitted; VAT rates
    are percentages (23 means 23%) and default to no VAT when omitted.
    """

    landlord_rent: Decimal = Field(default=Decimal("0"), ge=0)
    housing_rent: Decimal = Field(default=Decimal("0"), ge=0)

    cold_water_price: Decimal = Field(ge=0)
    hot_water_price: Decimal | None = Field(default=None, ge=0)
    gas_price: Decimal | None = Field(default=None, ge=0)
    energy_price: Decimal = Field(ge=0)
    heat_price: Decimal | None = Field(default=None, ge=0)

    gas_subscription: Decimal | None = Field(default=None, ge=0)
    energy_subscription: Decimal | None = Field(default=None, ge=0)
    heat_subscription: Decimal | None = Field(default=None, ge=0)

    landlord_rent_vat: Decimal | None = Field(default=None, ge=0, le=100)
    housing_rent_vat: Decimal | None = Field(default=None, ge=0, le=100)
    water_vat: Decimal | None = Field(default=None, ge=0, le=100)
    gas_vat: Decimal | None = Field(default=None, ge=0, le=100)
    energy_vat: Decimal | None = Field(default=None, ge=0, le=100)
    heat_vat: Decimal | None = Field(default=None, ge=0, le=100)


class RateUpdate(RateBase):
    """Schema for publishing a new rate version for a property."""


class RateResponse(RateBase):
    """Schema for rate response."""

    id: int
    property_id: int
    is_active: bool
    created_at: datetime
    superseded_at: datetime | None

    model_config = {"from_attributes": True}
