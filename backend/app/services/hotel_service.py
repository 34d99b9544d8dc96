"""
Hotel registration and admin review.

A registration starts pending. Approval makes the owner a hotel owner and
lists the hotel for guests; a declined owner may register again.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import HotelAlreadyRegistered, HotelNotFound, HotelNotPending
from app.core.logging import get_logger
from app.core.permissions import Actor, Role, ensure_role
from app.models.hotel import Hotel, HotelStatus
from app.models.user import User
from app.schemas.hotel import HotelCreate

logger = get_logger(__name__)


async def get_owned_hotel(db: AsyncSession, owner_id: str) -> Hotel:
    result = await db.execute(select(Hotel).where(Hotel.owner_id == owner_id))
    hotel = result.scalar_one_or_none()
    if not hotel:
        raise HotelNotFound("You have not registered a hotel")
    return hotel


async def register_hotel(db: AsyncSession, actor: Actor, hotel_data: HotelCreate) -> Hotel:
    result = await db.execute(select(Hotel).where(Hotel.owner_id == actor.user_id))
    hotel = result.scalar_one_or_none()

    if hotel is None:
        hotel = Hotel(owner_id=actor.user_id)
        db.add(hotel)
    elif hotel.status != HotelStatus.DECLINED.value:
        raise HotelAlreadyRegistered()

    hotel.name = hotel_data.name
    hotel.address = hotel_data.address
    hotel.contact = hotel_data.contact
    hotel.city = hotel_data.city
    hotel.status = HotelStatus.PENDING.value

    await db.flush()
    await db.refresh(hotel)

    logger.info("hotel_registered", hotel_id=hotel.id, owner_id=actor.user_id, city=hotel.city)
    return hotel


async def list_approved_hotels(db: AsyncSession, city: Optional[str] = None) -> list[Hotel]:
    query = select(Hotel).where(Hotel.status == HotelStatus.APPROVED.value)
    if city:
        query = query.where(func.lower(Hotel.city) == city.strip().lower())
    result = await db.execute(query.order_by(Hotel.name, Hotel.id))
    return list(result.scalars().all())


async def list_hotels(db: AsyncSession, actor: Actor, status: Optional[HotelStatus] = None) -> list[Hotel]:
    """Every hotel regardless of review state, oldest registration first."""
    ensure_role(actor, Role.ADMIN)
    query = select(Hotel)
    if status is not None:
        query = query.where(Hotel.status == status.value)
    result = await db.execute(query.order_by(Hotel.created_at, Hotel.id))
    return list(result.scalars().all())


async def _pending_hotel(db: AsyncSession, actor: Actor, hotel_id: int) -> Hotel:
    ensure_role(actor, Role.ADMIN)
    hotel = await db.get(Hotel, hotel_id)
    if hotel is None:
        raise HotelNotFound(f"Hotel {hotel_id} not found")
    if hotel.status != HotelStatus.PENDING.value:
        raise HotelNotPending(f"Hotel {hotel_id} is already {hotel.status}")
    return hotel


async def approve_hotel(db: AsyncSession, actor: Actor, hotel_id: int) -> Hotel:
    hotel = await _pending_hotel(db, actor, hotel_id)
    hotel.status = HotelStatus.APPROVED.value

    owner = await db.get(User, hotel.owner_id)
    # Admins keep their role
    if owner.role == Role.USER.value:
        owner.role = Role.HOTEL_OWNER.value

    await db.flush()
    await db.refresh(hotel)
    logger.info("hotel_approved", hotel_id=hotel.id, owner_id=hotel.owner_id, reviewer_id=actor.user_id)
    return hotel


async def decline_hotel(db: AsyncSession, actor: Actor, hotel_id: int) -> Hotel:
    hotel = await _pending_hotel(db, actor, hotel_id)
    hotel.status = HotelStatus.DECLINED.value

    await db.flush()
    await db.refresh(hotel)
    logger.info("hotel_declined", hotel_id=hotel.id, owner_id=hotel.owner_id, reviewer_id=actor.user_id)
    return hotel
