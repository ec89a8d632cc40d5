"""Rent Pydantic schemas for request/response validation."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from rentledger.models.enums import RentPurpose
from rentledger.schemas.state import MeterReadings


class RentBase(BaseModel):
    """Base rent schema."""

    rent_purpose: RentPurpose
    start_rent: date
    end_rent: date
    tenant_count: int = Field(ge=1, le=100)
    rent_deposit: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    pay_day_delay: int = Field(ge=0, le=60)
    send_state_day: int = Field(ge=1, le=31)
    landlord_comment: str | None = Field(default=None, max_length=255)
    photo_required: bool = False

    @model_validator(mode="after")
    def check_dates(self) -> "RentBase":
        """The contract may not end before it starts."""
        if self.end_rent < self.start_rent:
            raise ValueError("end_rent must not be before start_rent")
        return self


class RentCreate(RentBase):
    """Schema for creating a rent with its initial meter readings."""

    property_id: int
    tenant_id: int
    landlord_id: int
    initial_readings: MeterReadings


class RentUpdate(RentBase):
    """Schema for replacing all scalar rent fields."""


class RentResponse(RentBase):
    """Schema for rent response."""

    id: int
    property_id: int
    tenant_id: int
    landlord_id: int
    created_at: datetime
    is_deleted: bool

    model_config = {"from_attributes": True}
