"""
Hotel registration, public listing and admin review endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models.hotel import HotelStatus
from app.schemas.hotel import HotelCreate, HotelResponse
from app.services import hotel_service
from app.core.permissions import Actor
from app.core.security import get_current_actor

router = APIRouter(prefix="/hotels", tags=["Hotels"])


@router.get("/", response_model=list[HotelResponse])
async def list_hotels(
    city: Optional[str] = Query(None, min_length=1),
    db: AsyncSession = Depends(get_db),
):
    """Approved hotels, optionally in one city."""
    return await hotel_service.list_approved_hotels(db, city)


@router.post("/", response_model=HotelResponse, status_code=status.HTTP_201_CREATED)
async def register_hotel_endpoint(
    hotel_data: HotelCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Register the caller's hotel for admin review."""
    return await hotel_service.register_hotel(db, actor, hotel_data)


@router.get("/owner", response_model=HotelResponse)
async def get_owner_hotel(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await hotel_service.get_owned_hotel(db, actor.user_id)


@router.get("/admin", response_model=list[HotelResponse])
async def list_all_hotels(
    hotel_status: Optional[HotelStatus] = Query(None, alias="status"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """All hotels for admins, optionally filtered by review state."""
    return await hotel_service.list_hotels(db, actor, hotel_status)


@router.get("/pending", response_model=list[HotelResponse])
async def list_pending_hotels(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await hotel_service.list_hotels(db, actor, HotelStatus.PENDING)


@router.post("/{hotel_id}/approve", response_model=HotelResponse)
async def approve_hotel(
    hotel_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await hotel_service.approve_hotel(db, actor, hotel_id)


@router.post("/{hotel_id}/decline", response_model=HotelResponse)
async def decline_hotel(
    hotel_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await hotel_service.decline_hotel(db, actor, hotel_id)
