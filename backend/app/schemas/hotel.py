"""
Pydantic schemas for hotel registration.
"""

from datetime import datetime
from pydantic import BaseModel, Field

from app.models.hotel import HotelStatus


class HotelCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1, max_length=500)
    contact: str = Field(..., min_length=3, max_length=50)
    city: str = Field(..., min_length=1, max_length=100)


class HotelResponse(BaseModel):
    id: int
    name: str
    address: str
    contact: str
    city: str
    status: HotelStatus
    owner_id: str
    created_at: datetime

    model_config = {"from_attributes": True}
