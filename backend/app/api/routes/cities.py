"""
City catalog endpoints. Any signed-in user may read; admins curate.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.permissions import Actor
from app.core.security import get_current_actor
from app.db.session import get_db
from app.schemas.city import CityCreate, CityResponse
from app.services import city_service

router = APIRouter(prefix="/cities", tags=["Cities"])


@router.get("/", response_model=list[CityResponse])
async def list_cities(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await city_service.list_cities(db)


@router.post("/", response_model=CityResponse, status_code=status.HTTP_201_CREATED)
async def add_city(
    city_data: CityCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await city_service.add_city(db, actor, city_data)


@router.delete("/{city_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_city(
    city_id: int,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    await city_service.delete_city(db, actor, city_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
