"""
Pydantic schemas for room-related request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field

from app.schemas.hotel import HotelResponse


class RoomCreate(BaseModel):
    room_type: str = Field(..., min_length=1, max_length=100)
    price_per_night: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    capacity: int = Field(default=2, gt=0, le=20)
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list, max_length=5)


class RoomResponse(BaseModel):
    id: int
    hotel_id: int
    room_type: str
    price_per_night: Decimal
    capacity: int
    amenities: list[str]
    images: list[str]
    is_available: bool
    hotel: HotelResponse
    created_at: datetime

    model_config = {"from_attributes": True}


class RoomListResponse(BaseModel):
    rooms: list[RoomResponse]
    total: int
    cached: bool = False
