"""
Roles and authorization checks.

The authenticated caller is an explicit Actor passed into each service call.
Checks branch over every Role member so adding a role fails type checking
until each check decides what the new role may do.
"""

from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from app.core.exceptions import Forbidden


class Role(str, Enum):
    USER = "user"
    HOTEL_OWNER = "hotel_owner"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: Role


def can_manage_hotel(actor: Actor, hotel_owner_id: str) -> bool:
    """Hotel owners manage their own hotel; admins manage every hotel."""
    match actor.role:
        case Role.ADMIN:
            return True
        case Role.HOTEL_OWNER:
            return actor.user_id == hotel_owner_id
        case Role.USER:
            return False
        case _:
            assert_never(actor.role)


def can_request_refund(actor: Actor, booking_user_id: str) -> bool:
    match actor.role:
        case Role.ADMIN:
            return True
        case Role.HOTEL_OWNER | Role.USER:
            return actor.user_id == booking_user_id
        case _:
            assert_never(actor.role)


def ensure_role(actor: Actor, *allowed: Role) -> None:
    if actor.role not in allowed:
        raise Forbidden(f"This action requires one of: {', '.join(r.value for r in allowed)}")
