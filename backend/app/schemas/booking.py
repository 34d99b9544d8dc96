"""
Pydantic schemas for booking-related request/response validation.

Dates may arrive as plain dates or full timestamps from a date picker; the
time of day is dropped either way.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, TypeAdapter, field_validator

_datetime_adapter = TypeAdapter(datetime)


def to_calendar_day(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10:
        return _datetime_adapter.validate_python(value).date()
    return value


class BookingCreate(BaseModel):
    room: int
    check_in_date: date
    check_out_date: date
    guests: int = Field(default=1)
    payment_method: Optional[str] = Field(default=None, max_length=50)

    @field_validator("check_in_date", "check_out_date", mode="before")
    @classmethod
    def normalize_dates(cls, value):
        return to_calendar_day(value)


class AvailabilityRequest(BaseModel):
    room: int
    check_in_date: date
    check_out_date: date

    @field_validator("check_in_date", "check_out_date", mode="before")
    @classmethod
    def normalize_dates(cls, value):
        return to_calendar_day(value)


class AvailabilityResponse(BaseModel):
    room: int
    is_available: bool


class BookingResponse(BaseModel):
    id: int
    user_id: str
    room_id: int
    hotel_id: int
    check_in: date
    check_out: date
    nights: int
    total_price: Decimal
    guests: int
    status: str
    payment_method: str
    payment_status: str
    refund_status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RoomBookingSlot(BaseModel):
    """Public view of a booking: enough to grey out dates, nothing about the guest."""
    id: int
    check_in: date
    check_out: date
    status: str

    model_config = {"from_attributes": True}


class OwnerBookingsResponse(BaseModel):
    bookings: list[BookingResponse]
    total_bookings: int
    total_revenue: Decimal
