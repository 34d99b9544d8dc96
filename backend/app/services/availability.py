"""
Availability evaluation for room date ranges.

ADJACENCY POLICY
================

Ranges are whole calendar days. By default both ends are inclusive: a stay
checking out on the 12th blocks a new stay checking in on the 12th, the same
way the room page greys out every day from check-in through check-out.

Setting ALLOW_SAME_DAY_TURNOVER=true makes the comparison strict so that a
check-in may land on another booking's check-out day.

Only pending and confirmed bookings occupy the calendar.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models.booking import Booking, ACTIVE_STATUSES

settings = get_settings()


def ranges_overlap(
    check_in: date,
    check_out: date,
    other_check_in: date,
    other_check_out: date,
    allow_same_day_turnover: Optional[bool] = None,
) -> bool:
    if allow_same_day_turnover is None:
        allow_same_day_turnover = settings.ALLOW_SAME_DAY_TURNOVER
    if allow_same_day_turnover:
        return check_in < other_check_out and check_out > other_check_in
    return check_in <= other_check_out and check_out >= other_check_in


def overlap_clause(check_in: date, check_out: date, allow_same_day_turnover: Optional[bool] = None):
    """SQL form of ranges_overlap against Booking columns."""
    if allow_same_day_turnover is None:
        allow_same_day_turnover = settings.ALLOW_SAME_DAY_TURNOVER
    if allow_same_day_turnover:
        return and_(Booking.check_in < check_out, Booking.check_out > check_in)
    return and_(Booking.check_in <= check_out, Booking.check_out >= check_in)


async def find_conflicts(
    db: AsyncSession,
    room_id: int,
    check_in: date,
    check_out: date,
    user_id: Optional[str] = None,
) -> list[Booking]:
    """Active bookings of the room overlapping the range, optionally for one user only."""
    query = select(Booking).where(
        Booking.room_id == room_id,
        Booking.status.in_(ACTIVE_STATUSES),
        overlap_clause(check_in, check_out),
    )
    if user_id is not None:
        query = query.where(Booking.user_id == user_id)

    result = await db.execute(query.order_by(Booking.check_in))
    return list(result.scalars().all())


async def is_range_available(
    db: AsyncSession,
    room_id: int,
    check_in: date,
    check_out: date,
) -> bool:
    conflicts = await find_conflicts(db, room_id, check_in, check_out)
    return not conflicts


async def get_room_bookings(
    db: AsyncSession,
    room_id: int,
    include_inactive: bool = False,
) -> list[Booking]:
    query = select(Booking).where(Booking.room_id == room_id)
    if not include_inactive:
        query = query.where(Booking.status.in_(ACTIVE_STATUSES))
    result = await db.execute(query.order_by(Booking.check_in))
    return list(result.scalars().all())


def blocked_dates(bookings: Iterable[Booking], allow_same_day_turnover: Optional[bool] = None) -> list[date]:
    """Every day a new stay may not start on, sorted and de-duplicated."""
    if allow_same_day_turnover is None:
        allow_same_day_turnover = settings.ALLOW_SAME_DAY_TURNOVER

    days: set[date] = set()
    for booking in bookings:
        if not booking.is_active:
            continue
        # With turnover allowed the check-out day is free for the next guest
        last = booking.check_out - timedelta(days=1) if allow_same_day_turnover else booking.check_out
        current = booking.check_in
        while current <= last:
            days.add(current)
            current += timedelta(days=1)
    return sorted(days)
