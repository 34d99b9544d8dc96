"""
Bearer token handling.

Identity is issued by the external auth provider; we only verify the signed
token, look the user up and hand an explicit Actor to the route.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import NotAuthenticated, Forbidden
from app.core.logging import get_logger
from app.core.permissions import Actor, Role
from app.db.session import get_db
from app.models.user import User

logger = get_logger(__name__)
settings = get_settings()

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token; used by tests and local tooling in place of the auth provider."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=60))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the subject of a valid token."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError as e:
        logger.warning("token_rejected", error=str(e))
        raise NotAuthenticated("Invalid or expired token")

    subject = payload.get("sub")
    if not subject:
        raise NotAuthenticated("Token has no subject")
    return str(subject)


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    if credentials is None:
        raise NotAuthenticated()

    user_id = decode_access_token(credentials.credentials)
    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise NotAuthenticated("Unknown or inactive user")

    return Actor(user_id=user.id, role=Role(user.role))


def verify_webhook_secret(expected: str):
    """Dependency factory guarding collaborator callbacks with a shared secret."""

    async def _verify(x_webhook_secret: Optional[str] = Header(default=None)) -> None:
        if x_webhook_secret != expected:
            logger.warning("webhook_rejected")
            raise Forbidden("Invalid webhook secret")

    return _verify
