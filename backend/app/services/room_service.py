"""
Room management and search.
"""

from datetime import date
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import Forbidden, InvalidDateRange, RoomNotFound
from app.core.logging import get_logger
from app.core.permissions import Actor, Role, can_manage_hotel, ensure_role
from app.models.booking import Booking, ACTIVE_STATUSES
from app.models.hotel import Hotel, HotelStatus
from app.models.room import Room
from app.schemas.room import RoomCreate
from app.services.availability import overlap_clause
from app.services.hotel_service import get_owned_hotel

logger = get_logger(__name__)


async def get_room(db: AsyncSession, room_id: int) -> Room:
    result = await db.execute(select(Room).where(Room.id == room_id))
    room = result.scalar_one_or_none()
    if not room:
        raise RoomNotFound(f"Room {room_id} not found")
    return room


async def create_room(db: AsyncSession, actor: Actor, room_data: RoomCreate) -> Room:
    """Add a room to the owner's hotel."""
    ensure_role(actor, Role.HOTEL_OWNER)
    hotel = await get_owned_hotel(db, actor.user_id)
    if hotel.status != HotelStatus.APPROVED.value:
        raise Forbidden("Hotel is awaiting approval")

    room = Room(
        hotel_id=hotel.id,
        room_type=room_data.room_type,
        price_per_night=room_data.price_per_night,
        capacity=room_data.capacity,
        amenities=room_data.amenities,
        images=room_data.images,
        is_available=True,
    )
    db.add(room)
    await db.flush()
    await db.refresh(room)

    logger.info("room_created", room_id=room.id, hotel_id=hotel.id, room_type=room.room_type)
    return await get_room(db, room.id)


async def list_available_rooms(db: AsyncSession) -> list[Room]:
    """Rooms open for booking, newest first."""
    result = await db.execute(
        select(Room)
        .where(Room.is_available.is_(True))
        .order_by(Room.created_at.desc(), Room.id.desc())
    )
    return list(result.scalars().all())


async def list_owner_rooms(db: AsyncSession, actor: Actor) -> list[Room]:
    ensure_role(actor, Role.HOTEL_OWNER)
    hotel = await get_owned_hotel(db, actor.user_id)
    result = await db.execute(select(Room).where(Room.hotel_id == hotel.id).order_by(Room.id))
    return list(result.scalars().all())


async def list_all_rooms(db: AsyncSession, actor: Actor) -> list[Room]:
    ensure_role(actor, Role.ADMIN)
    result = await db.execute(select(Room).order_by(Room.id))
    return list(result.scalars().all())


async def toggle_availability(db: AsyncSession, actor: Actor, room_id: int) -> Room:
    room = await get_room(db, room_id)
    if not can_manage_hotel(actor, room.hotel.owner_id):
        raise Forbidden("You can only manage rooms of your own hotel")

    room.is_available = not room.is_available
    await db.flush()
    await db.refresh(room)

    logger.info("room_availability_toggled", room_id=room.id, is_available=room.is_available)
    return room


async def search_rooms(
    db: AsyncSession,
    city: Optional[str] = None,
    check_in: Optional[date] = None,
    check_out: Optional[date] = None,
    guests: int = 1,
) -> list[Room]:
    """
    Open rooms that fit the party and, when dates are given, have no active
    booking overlapping them.
    """
    query = select(Room).join(Hotel).where(
        Room.is_available.is_(True),
        Room.capacity >= guests,
    )
    if city:
        query = query.where(func.lower(Hotel.city) == city.strip().lower())

    if check_in is not None or check_out is not None:
        if check_in is None or check_out is None or check_out <= check_in:
            raise InvalidDateRange()
        busy = select(Booking.room_id).where(
            Booking.status.in_(ACTIVE_STATUSES),
            overlap_clause(check_in, check_out),
        )
        query = query.where(Room.id.not_in(busy))

    result = await db.execute(query.order_by(Room.price_per_night, Room.id))
    return list(result.scalars().unique().all())
