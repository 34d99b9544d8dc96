"""
Room endpoints with Redis caching on the public listing.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.room import RoomCreate, RoomResponse, RoomListResponse
from app.services import room_service
from app.services.cache_service import (
    get_cached_rooms,
    invalidate_room_cache,
    search_key,
    set_cached_rooms,
)
from app.core.permissions import Actor
from app.core.security import get_current_actor
from app.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("/", response_model=RoomListResponse)
async def list_rooms(db: AsyncSession = Depends(get_db)):
    """
    Rooms open for booking.
    Cached in Redis; invalidated when rooms are created or toggled.
    """
    cached = await get_cached_rooms()
    if cached:
        logger.info("rooms_list_cache_hit")
        cached["cached"] = True
        return RoomListResponse(**cached)

    rooms = await room_service.list_available_rooms(db)
    response_data = {
        "rooms": [RoomResponse.model_validate(r).model_dump(mode="json") for r in rooms],
        "total": len(rooms),
        "cached": False,
    }
    await set_cached_rooms(response_data)
    return RoomListResponse(**response_data)


@router.get("/search", response_model=list[RoomResponse])
async def search_rooms(
    city: Optional[str] = Query(None, max_length=100),
    check_in: Optional[date] = Query(None),
    check_out: Optional[date] = Query(None),
    guests: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db),
):
    """
    Open rooms in a city that fit the party and are free on the given dates.
    Searches without dates are cached; dated searches always read the calendar.
    """
    if check_in is not None or check_out is not None:
        return await room_service.search_rooms(db, city, check_in, check_out, guests)

    key = search_key(city, guests)
    cached = await get_cached_rooms(key)
    if cached is not None:
        return cached["rooms"]

    rooms = [
        RoomResponse.model_validate(r).model_dump(mode="json")
        for r in await room_service.search_rooms(db, city, guests=guests)
    ]
    await set_cached_rooms({"rooms": rooms}, key)
    return rooms


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    room_data: RoomCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Add a room to the caller's hotel."""
    room = await room_service.create_room(db, actor, room_data)
    # Commit first so a concurrent listing cannot re-cache the old rows
    await db.commit()
    await invalidate_room_cache()
    return room


@router.get("/owner", response_model=list[RoomResponse])
async def list_owner_rooms(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await room_service.list_owner_rooms(db, actor)


@router.get("/admin", response_model=list[RoomResponse])
async def list_all_rooms(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await room_service.list_all_rooms(db, actor)


@router.put("/{room_id}/availability", response_model=RoomResponse)
async def toggle_room_availability(
    room_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Open or close a room for booking. Existing bookings are untouched."""
    room = await room_service.toggle_availability(db, actor, room_id)
    await db.commit()
    await invalidate_room_cache()
    return room


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room(room_id: int, db: AsyncSession = Depends(get_db)):
    """Single room. Not cached."""
    return await room_service.get_room(db, room_id)
