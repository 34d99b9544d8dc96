"""
Local user records kept in sync with the auth provider.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.exceptions import Forbidden, UserNotFound
from app.core.permissions import Actor, Role, ensure_role
from app.models.user import User
from app.schemas.user import AuthWebhookEvent

logger = get_logger(__name__)

MAX_RECENT_CITIES = 3


async def get_user(db: AsyncSession, actor: Actor) -> User:
    return await db.get(User, actor.user_id)


async def add_recent_city(db: AsyncSession, actor: Actor, city: str) -> User:
    """Remember a searched city; keeps the latest three, most recent last."""
    user = await db.get(User, actor.user_id)
    cities = [c for c in (user.recent_searched_cities or []) if c != city]
    cities.append(city)
    # Reassign so the JSON column is marked dirty
    user.recent_searched_cities = cities[-MAX_RECENT_CITIES:]
    await db.flush()
    await db.refresh(user)
    return user


async def list_users(db: AsyncSession, actor: Actor) -> list[User]:
    ensure_role(actor, Role.ADMIN)
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id))
    return list(result.scalars().all())


async def update_role(db: AsyncSession, actor: Actor, user_id: str, role: Role) -> User:
    ensure_role(actor, Role.ADMIN)
    if user_id == actor.user_id:
        raise Forbidden("Admins cannot change their own role")

    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFound(f"User {user_id} not found")

    previous = user.role
    user.role = role.value
    await db.flush()
    await db.refresh(user)

    logger.info("user_role_updated", user_id=user.id, previous_role=previous, role=user.role, admin_id=actor.user_id)
    return user


async def apply_auth_event(db: AsyncSession, event: AuthWebhookEvent) -> User | None:
    data = event.data
    user = await db.get(User, data.id)

    if event.type == "user.deleted":
        if user is None:
            return None
        # Bookings reference the user, so deactivate instead of deleting
        user.is_active = False
        await db.flush()
        logger.info("user_deactivated", user_id=user.id)
        return user

    if user is None:
        user = User(
            id=data.id,
            email=data.email or "",
            username=data.username or data.id,
            image=data.image,
            role="user",
            recent_searched_cities=[],
            is_active=True,
        )
        db.add(user)
        logger.info("user_created", user_id=data.id)
    else:
        if data.email is not None:
            user.email = data.email
        if data.username is not None:
            user.username = data.username
        if data.image is not None:
            user.image = data.image
        user.is_active = True
        logger.info("user_updated", user_id=user.id)

    await db.flush()
    await db.refresh(user)
    return user
