"""
City catalog for the destination picker.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CityAlreadyExists, CityNotFound
from app.core.logging import get_logger
from app.core.permissions import Actor, Role, ensure_role
from app.models.city import City
from app.schemas.city import CityCreate

logger = get_logger(__name__)


async def list_cities(db: AsyncSession) -> list[City]:
    result = await db.execute(select(City).order_by(City.name))
    return list(result.scalars().all())


async def add_city(db: AsyncSession, actor: Actor, city_data: CityCreate) -> City:
    ensure_role(actor, Role.ADMIN)
    name = city_data.name.strip()

    # Names are unique regardless of case
    existing = await db.scalar(select(City.id).where(func.lower(City.name) == name.lower()))
    if existing is not None:
        raise CityAlreadyExists(f"{name} is already listed")

    city = City(name=name, description=city_data.description, image=city_data.image)
    db.add(city)
    await db.flush()
    await db.refresh(city)

    logger.info("city_added", city_id=city.id, name=city.name)
    return city


async def delete_city(db: AsyncSession, actor: Actor, city_id: int) -> None:
    ensure_role(actor, Role.ADMIN)
    city = await db.get(City, city_id)
    if city is None:
        raise CityNotFound(f"City {city_id} not found")

    name = city.name
    await db.delete(city)
    await db.flush()
    logger.info("city_deleted", city_id=city_id, name=name)
