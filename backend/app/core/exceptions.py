"""
Typed application errors.

Services raise these; the handlers registered in app.main render them as
{"success": false, "code": ..., "message": ...} with the matching HTTP status.
"""

from enum import Enum

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from app.core.logging import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    INVALID_GUEST_COUNT = "INVALID_GUEST_COUNT"
    DUPLICATE_BOOKING = "DUPLICATE_BOOKING"
    ROOM_UNAVAILABLE = "ROOM_UNAVAILABLE"
    FORBIDDEN = "FORBIDDEN"
    ALREADY_FINALIZED = "ALREADY_FINALIZED"
    NOT_REFUNDABLE = "NOT_REFUNDABLE"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    HOTEL_NOT_FOUND = "HOTEL_NOT_FOUND"
    HOTEL_ALREADY_REGISTERED = "HOTEL_ALREADY_REGISTERED"
    HOTEL_NOT_PENDING = "HOTEL_NOT_PENDING"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    CITY_NOT_FOUND = "CITY_NOT_FOUND"
    CITY_ALREADY_EXISTS = "CITY_ALREADY_EXISTS"


class BookingAppError(Exception):
    """Base class for every error reported to API callers."""

    code: ErrorCode = ErrorCode.STORE_UNAVAILABLE
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "code": self.code.value, "message": self.message}


class InvalidDateRange(BookingAppError):
    code = ErrorCode.INVALID_DATE_RANGE
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Check-out date must be after check-in date"


class InvalidGuestCount(BookingAppError):
    code = ErrorCode.INVALID_GUEST_COUNT
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Guest count must be between 1 and the room capacity"


class DuplicateBooking(BookingAppError):
    code = ErrorCode.DUPLICATE_BOOKING
    status_code = status.HTTP_409_CONFLICT
    default_message = "You have already booked this room for these dates"


class RoomUnavailable(BookingAppError):
    code = ErrorCode.ROOM_UNAVAILABLE
    status_code = status.HTTP_409_CONFLICT
    default_message = "Room is not available for the selected dates"


class Forbidden(BookingAppError):
    code = ErrorCode.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class AlreadyFinalized(BookingAppError):
    code = ErrorCode.ALREADY_FINALIZED
    status_code = status.HTTP_409_CONFLICT
    default_message = "Booking can no longer be changed"


class NotRefundable(BookingAppError):
    code = ErrorCode.NOT_REFUNDABLE
    status_code = status.HTTP_409_CONFLICT
    default_message = "Booking is not eligible for a refund"


class StoreUnavailable(BookingAppError):
    code = ErrorCode.STORE_UNAVAILABLE
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage is temporarily unavailable, please try again"


class NotAuthenticated(BookingAppError):
    code = ErrorCode.NOT_AUTHENTICATED
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class RoomNotFound(BookingAppError):
    code = ErrorCode.ROOM_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Room not found"


class BookingNotFound(BookingAppError):
    code = ErrorCode.BOOKING_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Booking not found"


class HotelNotFound(BookingAppError):
    code = ErrorCode.HOTEL_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Hotel not found"


class HotelAlreadyRegistered(BookingAppError):
    code = ErrorCode.HOTEL_ALREADY_REGISTERED
    status_code = status.HTTP_409_CONFLICT
    default_message = "Hotel already registered"


class HotelNotPending(BookingAppError):
    code = ErrorCode.HOTEL_NOT_PENDING
    status_code = status.HTTP_409_CONFLICT
    default_message = "Only pending hotel registrations can be reviewed"


class UserNotFound(BookingAppError):
    code = ErrorCode.USER_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class CityNotFound(BookingAppError):
    code = ErrorCode.CITY_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "City not found"


class CityAlreadyExists(BookingAppError):
    code = ErrorCode.CITY_ALREADY_EXISTS
    status_code = status.HTTP_409_CONFLICT
    default_message = "City already listed"


async def booking_app_error_handler(request: Request, exc: BookingAppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, NotAuthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("store_unavailable", error=str(exc), error_type=type(exc).__name__)
    error = StoreUnavailable()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


STORE_ERRORS = (OperationalError, InterfaceError)
