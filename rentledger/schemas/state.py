"""State Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from rentledger.models.enums import UtilityCategory


class MeterReadings(BaseModel):
    """Cumulative register values; omit utilities the property does not have."""

    cold_water: Decimal = Field(ge=0, max_digits=12, decimal_places=3)
    hot_water: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=3)
    gas: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=3)
    energy: Decimal = Field(ge=0, max_digits=12, decimal_places=3)
    heat: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=3)

    def to_mapping(self) -> dict[UtilityCategory, Decimal]:
        """Return the given readings keyed by utility."""
        readings = {category: getattr(self, category.value) for category in UtilityCategory}
        return {category: value for category, value in readings.items() if value is not None}


class StateCreate(MeterReadings):
    """Schema for appending a state to a rent's ledger."""

    is_initial: bool = False


class StateCorrection(MeterReadings):
    """Schema for replacing the readings of the latest, not yet billed state."""


class StateResponse(BaseModel):
    """Schema for state response."""

    id: int
    rent_id: int
    sequence: int
    cold_water: Decimal
    hot_water: Decimal | None
    gas: Decimal | None
    energy: Decimal
    heat: Decimal | None
    is_initial: bool
    is_confirmed: bool
    rate_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}
