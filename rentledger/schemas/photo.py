"""Photo Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel

from rentledger.models.enums import UtilityCategory


class PhotoResponse(BaseModel):
    """Schema describing which meter photos a state has."""

    id: int
    state_id: int
    categories: list[UtilityCategory]
    created_at: datetime
