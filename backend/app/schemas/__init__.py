from app.schemas.user import UserResponse, RecentCityCreate, RoleUpdate, AuthWebhookEvent
from app.schemas.hotel import HotelCreate, HotelResponse
from app.schemas.room import RoomCreate, RoomResponse, RoomListResponse
from app.schemas.booking import (
    BookingCreate, BookingResponse, AvailabilityRequest, AvailabilityResponse,
    RoomBookingSlot, OwnerBookingsResponse,
)
from app.schemas.payment import PaymentWebhookEvent
from app.schemas.city import CityCreate, CityResponse

__all__ = [
    "UserResponse", "RecentCityCreate", "RoleUpdate", "AuthWebhookEvent",
    "HotelCreate", "HotelResponse",
    "RoomCreate", "RoomResponse", "RoomListResponse",
    "BookingCreate", "BookingResponse", "AvailabilityRequest", "AvailabilityResponse",
    "RoomBookingSlot", "OwnerBookingsResponse",
    "PaymentWebhookEvent",
    "CityCreate", "CityResponse",
]
