"""
User profile endpoints and the auth provider's user sync callback.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.permissions import Actor
from app.core.security import get_current_actor, verify_webhook_secret
from app.db.session import get_db
from app.schemas.user import AuthWebhookEvent, RecentCityCreate, RoleUpdate, UserResponse
from app.services import user_service

settings = get_settings()
router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/", response_model=list[UserResponse])
async def list_users(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """All users, newest first. Admin only."""
    return await user_service.list_users(db, actor)


@router.get("/me", response_model=UserResponse)
async def get_me(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.get_user(db, actor)


@router.post("/recent-cities", response_model=UserResponse)
async def add_recent_city(
    payload: RecentCityCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.add_recent_city(db, actor, payload.city)


@router.put("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str,
    payload: RoleUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.update_role(db, actor, user_id, payload.role)


@router.post(
    "/webhook",
    dependencies=[Depends(verify_webhook_secret(settings.AUTH_WEBHOOK_SECRET))],
)
async def auth_webhook(event: AuthWebhookEvent, db: AsyncSession = Depends(get_db)):
    """User created/updated/deleted in the auth provider."""
    await user_service.apply_auth_event(db, event)
    return {"success": True, "message": f"Processed {event.type}"}
