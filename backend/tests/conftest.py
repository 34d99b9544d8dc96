"""
Pytest fixtures for test database, client, users of every role, a hotel and rooms.

Each test gets its own SQLite database file so sessions opened by concurrent
tests never share state.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("DB_CREATE_TABLES", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, timedelta
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.core.config import get_settings
from app.core.permissions import Actor, Role
from app.core.security import create_access_token
from app.models import User, Hotel, HotelStatus, Room

BASE_DAY = date(2030, 3, 1)


def day(n: int) -> date:
    """Calendar day n of the test month."""
    return BASE_DAY + timedelta(days=n - 1)


def actor_for(user: User) -> Actor:
    return Actor(user_id=user.id, role=Role(user.role))


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': user.id})}"}


@pytest.fixture
def settings():
    return get_settings()


@pytest_asyncio.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(db: AsyncSession, user_id: str, role: Role) -> User:
    user = User(
        id=user_id,
        email=f"{user_id}@example.com",
        username=user_id,
        role=role.value,
        recent_searched_cities=[],
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def guest(db_session: AsyncSession) -> User:
    return await make_user(db_session, "user_guest", Role.USER)


@pytest_asyncio.fixture
async def other_guest(db_session: AsyncSession) -> User:
    return await make_user(db_session, "user_other", Role.USER)


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    return await make_user(db_session, "user_owner", Role.HOTEL_OWNER)


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await make_user(db_session, "user_admin", Role.ADMIN)


@pytest_asyncio.fixture
async def auth_headers(guest: User) -> dict:
    return headers_for(guest)


@pytest_asyncio.fixture
async def hotel(db_session: AsyncSession, owner: User) -> Hotel:
    hotel = Hotel(
        name="Harbor View",
        address="1 Quay Street",
        contact="+1 555 0100",
        city="Lisbon",
        status=HotelStatus.APPROVED.value,
        owner_id=owner.id,
    )
    db_session.add(hotel)
    await db_session.commit()
    await db_session.refresh(hotel)
    return hotel


async def _make_room(db: AsyncSession, hotel: Hotel, **overrides) -> Room:
    values = dict(
        hotel_id=hotel.id,
        room_type="Double Bed",
        price_per_night=Decimal("100.00"),
        capacity=2,
        amenities=["Free WiFi", "Room Service"],
        images=[],
        is_available=True,
    )
    values.update(overrides)
    room = Room(**values)
    db.add(room)
    await db.commit()
    await db.refresh(room)
    return room


@pytest_asyncio.fixture
async def room(db_session: AsyncSession, hotel: Hotel) -> Room:
    """A double room: capacity 2, 100.00 per night."""
    return await _make_room(db_session, hotel)


@pytest_asyncio.fixture
async def suite(db_session: AsyncSession, hotel: Hotel) -> Room:
    return await _make_room(
        db_session, hotel, room_type="Family Suite", price_per_night=Decimal("250.00"), capacity=4
    )
