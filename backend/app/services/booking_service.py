"""
Booking creation with a conflict-free room calendar.

CONCURRENCY STRATEGY: Per-room lock + Optimistic Locking with Retry
====================================================================

Problem:
  Two guests request overlapping dates on the same room at the same time.
  Both read the room's bookings, both see the dates free, both insert.
  Result: A double-booked room.

Solution:
  1. Inside one worker, room_write_lock(room_id) serializes the whole
     check -> insert -> commit sequence for a room.
  2. Across workers, every booking claim bumps the room's `version`:

       UPDATE rooms SET version = version + 1
       WHERE id = :room_id AND version = :version_we_read

     If rows_affected == 0 another writer committed a booking for this room
     after we read it -> roll back, re-read and re-check. Under READ COMMITTED
     the losing UPDATE waits for the winner's row lock, then matches nothing.

  The version bump and the booking insert commit in one transaction, so a
  booking only exists if the checks ran against the latest room state.

Validation order (first failure wins):
  InvalidDateRange -> RoomNotFound -> InvalidGuestCount -> DuplicateBooking
  -> RoomUnavailable
"""

import time
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import (
    BookingAppError,
    BookingNotFound,
    DuplicateBooking,
    HotelNotFound,
    InvalidDateRange,
    InvalidGuestCount,
    RoomNotFound,
    RoomUnavailable,
)
from app.core.logging import get_logger
from app.core.metrics import booking_latency, booking_retries, record_booking_attempt
from app.core.permissions import Actor, Role, ensure_role
from app.models.booking import Booking, BookingStatus, PaymentStatus, RefundStatus
from app.models.hotel import Hotel
from app.models.room import Room
from app.services.availability import find_conflicts, is_range_available
from app.services.pricing import calculate_total_price
from app.services.room_locks import room_write_lock

logger = get_logger(__name__)
settings = get_settings()


async def _load_room(db: AsyncSession, room_id: int) -> Room:
    # populate_existing: a retry must see the version another writer committed
    result = await db.execute(
        select(Room).where(Room.id == room_id).execution_options(populate_existing=True)
    )
    room = result.scalar_one_or_none()
    if not room:
        raise RoomNotFound(f"Room {room_id} not found")
    return room


async def create_booking(
    db: AsyncSession,
    actor: Actor,
    room_id: int,
    check_in: date,
    check_out: date,
    guests: int,
    payment_method: Optional[str] = None,
) -> Booking:
    """
    Create a pending booking for the actor.
    Retries up to BOOKING_MAX_RETRIES times on room version conflicts.
    """
    start = time.perf_counter()
    try:
        booking = await _create_booking(db, actor, room_id, check_in, check_out, guests, payment_method)
    except BookingAppError as e:
        record_booking_attempt(e.code.value)
        logger.info(
            "booking_rejected",
            room_id=room_id,
            user_id=actor.user_id,
            check_in=str(check_in),
            check_out=str(check_out),
            code=e.code.value,
        )
        raise
    finally:
        booking_latency.observe(time.perf_counter() - start)

    record_booking_attempt("created")
    return booking


async def _create_booking(
    db: AsyncSession,
    actor: Actor,
    room_id: int,
    check_in: date,
    check_out: date,
    guests: int,
    payment_method: Optional[str],
) -> Booking:
    if check_out <= check_in:
        raise InvalidDateRange()

    # Only rooms that exist get a lock entry
    if await db.scalar(select(Room.id).where(Room.id == room_id)) is None:
        raise RoomNotFound(f"Room {room_id} not found")

    async with room_write_lock(room_id):
        for attempt in range(1, settings.BOOKING_MAX_RETRIES + 1):
            # Step 1: Read current room state
            room = await _load_room(db, room_id)

            if guests < 1 or guests > room.capacity:
                raise InvalidGuestCount(
                    f"Guest count must be between 1 and {room.capacity} for this room"
                )

            if await find_conflicts(db, room_id, check_in, check_out, user_id=actor.user_id):
                raise DuplicateBooking()

            if not room.is_available:
                raise RoomUnavailable("Room is not accepting bookings")

            if not await is_range_available(db, room_id, check_in, check_out):
                raise RoomUnavailable()

            # Step 2: Optimistic lock - claim the room only if nobody booked it since our read
            seen_version = room.version
            claim = await db.execute(
                update(Room)
                .where(Room.id == room_id, Room.version == seen_version)
                .values(version=Room.version + 1)
                .execution_options(synchronize_session=False)
            )

            if claim.rowcount == 0:
                booking_retries.inc()
                logger.info(
                    "booking_retry",
                    room_id=room_id,
                    attempt=attempt,
                    reason="version_conflict",
                )
                await db.rollback()
                continue

            # Step 3: Create booking record in the same transaction
            booking = Booking(
                user_id=actor.user_id,
                room_id=room.id,
                hotel_id=room.hotel_id,
                check_in=check_in,
                check_out=check_out,
                guests=guests,
                total_price=calculate_total_price(room.price_per_night, check_in, check_out),
                status=BookingStatus.PENDING.value,
                payment_method=payment_method or settings.DEFAULT_PAYMENT_METHOD,
                payment_status=PaymentStatus.AWAITING.value,
                refund_status=RefundStatus.NONE.value,
            )
            db.add(booking)
            await db.flush()
            await db.commit()
            await db.refresh(booking)

            logger.info(
                "booking_created",
                booking_id=booking.id,
                user_id=actor.user_id,
                room_id=room_id,
                check_in=str(check_in),
                check_out=str(check_out),
                total_price=str(booking.total_price),
                currency=settings.CURRENCY,
                attempt=attempt,
            )
            return booking

    raise RoomUnavailable("Room is being booked by another guest. Please try again.")


async def get_booking(db: AsyncSession, booking_id: int, for_update: bool = False) -> Booking:
    query = select(Booking).where(Booking.id == booking_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    booking = result.scalar_one_or_none()
    if not booking:
        raise BookingNotFound(f"Booking {booking_id} not found")
    return booking


async def get_user_bookings(db: AsyncSession, actor: Actor) -> list[Booking]:
    """Get all bookings for the actor, newest first."""
    result = await db.execute(
        select(Booking)
        .where(Booking.user_id == actor.user_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())


async def get_owner_bookings(db: AsyncSession, actor: Actor) -> tuple[list[Booking], Decimal]:
    """Bookings of the owner's hotel and the revenue from paid ones."""
    ensure_role(actor, Role.HOTEL_OWNER)

    hotel = (
        await db.execute(select(Hotel).where(Hotel.owner_id == actor.user_id))
    ).scalar_one_or_none()
    if not hotel:
        raise HotelNotFound("You have not registered a hotel")

    result = await db.execute(
        select(Booking)
        .where(Booking.hotel_id == hotel.id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    bookings = list(result.scalars().all())

    revenue = (
        await db.execute(
            select(func.coalesce(func.sum(Booking.total_price), 0)).where(
                Booking.hotel_id == hotel.id,
                Booking.payment_status == PaymentStatus.PAID.value,
                Booking.status == BookingStatus.CONFIRMED.value,
            )
        )
    ).scalar_one()
    return bookings, Decimal(str(revenue)).quantize(Decimal("0.01"))


async def get_all_bookings(db: AsyncSession, actor: Actor) -> list[Booking]:
    ensure_role(actor, Role.ADMIN)
    result = await db.execute(select(Booking).order_by(Booking.created_at.desc(), Booking.id.desc()))
    return list(result.scalars().all())
