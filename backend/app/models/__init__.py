from app.models.user import User
from app.models.hotel import Hotel, HotelStatus
from app.models.room import Room
from app.models.booking import Booking, BookingStatus, PaymentStatus, RefundStatus, ACTIVE_STATUSES
from app.models.city import City

__all__ = [
    "User", "Hotel", "HotelStatus", "Room",
    "Booking", "BookingStatus", "PaymentStatus", "RefundStatus", "ACTIVE_STATUSES",
    "City",
]
