"""
Booking endpoints with conflict-free room calendars.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.booking import (
    AvailabilityRequest,
    AvailabilityResponse,
    BookingCreate,
    BookingResponse,
    OwnerBookingsResponse,
    RoomBookingSlot,
)
from app.services import availability, booking_service, lifecycle_service
from app.services.room_service import get_room
from app.core.exceptions import InvalidDateRange
from app.core.permissions import Actor
from app.core.security import get_current_actor

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a room for a date range.

    The room calendar is checked and the booking written while holding the
    room's write lock, and the room version guards against writers in other
    processes. Overlapping requests get 409 ROOM_UNAVAILABLE.
    """
    return await booking_service.create_booking(
        db,
        actor,
        room_id=booking_data.room,
        check_in=booking_data.check_in_date,
        check_out=booking_data.check_out_date,
        guests=booking_data.guests,
        payment_method=booking_data.payment_method,
    )


@router.post("/check-availability", response_model=AvailabilityResponse)
async def check_availability(
    request: AvailabilityRequest,
    db: AsyncSession = Depends(get_db),
):
    """Whether the room can take a stay over the given dates."""
    if request.check_out_date <= request.check_in_date:
        raise InvalidDateRange()
    room = await get_room(db, request.room)
    is_available = room.is_available and await availability.is_range_available(
        db, room.id, request.check_in_date, request.check_out_date
    )
    return AvailabilityResponse(room=room.id, is_available=is_available)


@router.get("/room/{room_id}", response_model=list[RoomBookingSlot])
async def list_room_bookings(
    room_id: int,
    include_inactive: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """Bookings holding the room's calendar, used to grey out dates."""
    await get_room(db, room_id)
    return await availability.get_room_bookings(db, room_id, include_inactive=include_inactive)


@router.get("/room/{room_id}/blocked-dates")
async def list_blocked_dates(room_id: int, db: AsyncSession = Depends(get_db)):
    await get_room(db, room_id)
    bookings = await availability.get_room_bookings(db, room_id)
    return {"room": room_id, "blocked_dates": availability.blocked_dates(bookings)}


@router.get("/user", response_model=list[BookingResponse])
async def list_user_bookings(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Get all bookings for the authenticated user."""
    return await booking_service.get_user_bookings(db, actor)


@router.get("/owner", response_model=OwnerBookingsResponse)
async def list_owner_bookings(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Bookings for the caller's hotel with paid revenue."""
    bookings, revenue = await booking_service.get_owner_bookings(db, actor)
    return OwnerBookingsResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total_bookings=len(bookings),
        total_revenue=revenue,
    )


@router.get("/", response_model=list[BookingResponse])
async def list_all_bookings(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Admin: every booking."""
    return await booking_service.get_all_bookings(db, actor)


@router.put("/{booking_id}/release", response_model=BookingResponse)
async def release_booking(
    booking_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Cancel an unpaid booking and free its dates."""
    return await lifecycle_service.release(db, booking_id, actor)


@router.put("/{booking_id}/refund", response_model=BookingResponse)
async def refund_booking(
    booking_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Request a refund for a paid booking."""
    return await lifecycle_service.refund(db, booking_id, actor)
