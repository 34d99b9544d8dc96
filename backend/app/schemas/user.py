"""
Pydantic schemas for user-related request/response validation.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from app.core.permissions import Role


class UserResponse(BaseModel):
    id: str
    email: str
    username: str
    image: Optional[str]
    role: str
    recent_searched_cities: list[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class RecentCityCreate(BaseModel):
    city: str = Field(..., min_length=1, max_length=100)


class RoleUpdate(BaseModel):
    role: Role


class AuthWebhookUser(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    email: Optional[str] = None
    username: Optional[str] = None
    image: Optional[str] = None


class AuthWebhookEvent(BaseModel):
    """User lifecycle callback from the auth provider."""
    type: Literal["user.created", "user.updated", "user.deleted"]
    data: AuthWebhookUser
