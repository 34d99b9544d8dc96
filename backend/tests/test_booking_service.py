"""
Tests for the booking creation workflow, including concurrent and
cross-process (room version) conflicts.
"""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import select, update

from app.core.exceptions import (
    DuplicateBooking,
    InvalidDateRange,
    InvalidGuestCount,
    RoomNotFound,
    RoomUnavailable,
)
from app.models import Booking, Room
from app.services import booking_service
from app.services.booking_service import create_booking
from app.services.room_locks import active_room_locks, room_write_lock
from app.core.permissions import Role
from conftest import actor_for, day, make_user


@pytest.mark.asyncio
async def test_create_booking_persists_pending_booking(db_session, room, guest):
    booking = await create_booking(db_session, actor_for(guest), room.id, day(10), day(13), guests=2)

    assert booking.id is not None
    assert booking.status == "pending"
    assert booking.payment_status == "awaiting"
    assert booking.refund_status == "none"
    assert booking.hotel_id == room.hotel_id
    assert booking.total_price == Decimal("300.00")
    assert booking.payment_method == "Pay At Hotel"


@pytest.mark.asyncio
async def test_create_booking_bumps_room_version(db_session, room, guest):
    before = room.version
    await create_booking(db_session, actor_for(guest), room.id, day(10), day(12), guests=1)

    version = (await db_session.execute(select(Room.version).where(Room.id == room.id))).scalar_one()
    assert version == before + 1


@pytest.mark.asyncio
@pytest.mark.parametrize("check_in,check_out", [(12, 12), (12, 10), (20, 1)])
async def test_check_out_not_after_check_in_is_invalid(db_session, room, guest, check_in, check_out):
    with pytest.raises(InvalidDateRange):
        await create_booking(db_session, actor_for(guest), room.id, day(check_in), day(check_out), guests=1)


@pytest.mark.asyncio
async def test_invalid_dates_reported_before_missing_room(db_session, guest):
    with pytest.raises(InvalidDateRange):
        await create_booking(db_session, actor_for(guest), 9999, day(5), day(5), guests=1)


@pytest.mark.asyncio
async def test_missing_room(db_session, guest):
    with pytest.raises(RoomNotFound):
        await create_booking(db_session, actor_for(guest), 9999, day(5), day(6), guests=1)


@pytest.mark.asyncio
@pytest.mark.parametrize("guests", [0, -1, 3, 10])
async def test_guest_count_outside_capacity(db_session, room, guest, guests):
    with pytest.raises(InvalidGuestCount):
        await create_booking(db_session, actor_for(guest), room.id, day(5), day(6), guests=guests)


@pytest.mark.asyncio
async def test_same_user_overlapping_booking_is_duplicate(db_session, room, guest):
    await create_booking(db_session, actor_for(guest), room.id, day(10), day(12), guests=1)

    with pytest.raises(DuplicateBooking):
        await create_booking(db_session, actor_for(guest), room.id, day(11), day(13), guests=1)


@pytest.mark.asyncio
async def test_overlapping_booking_by_another_guest_is_unavailable(db_session, room, guest, other_guest):
    """Room capacity 2; A holds days 10-12; B asks for 11-13."""
    await create_booking(db_session, actor_for(guest), room.id, day(10), day(12), guests=2)

    with pytest.raises(RoomUnavailable):
        await create_booking(db_session, actor_for(other_guest), room.id, day(11), day(13), guests=2)


@pytest.mark.asyncio
async def test_cancelled_booking_frees_the_dates(db_session, room, guest, other_guest):
    first = await create_booking(db_session, actor_for(guest), room.id, day(10), day(12), guests=2)
    first.status = "cancelled"
    await db_session.commit()

    second = await create_booking(db_session, actor_for(other_guest), room.id, day(11), day(13), guests=2)
    assert second.status == "pending"


@pytest.mark.asyncio
async def test_abutting_stays_follow_turnover_setting(db_session, room, guest, other_guest, settings, monkeypatch):
    await create_booking(db_session, actor_for(guest), room.id, day(10), day(12), guests=1)

    monkeypatch.setattr(settings, "ALLOW_SAME_DAY_TURNOVER", False)
    with pytest.raises(RoomUnavailable):
        await create_booking(db_session, actor_for(other_guest), room.id, day(12), day(14), guests=1)

    monkeypatch.setattr(settings, "ALLOW_SAME_DAY_TURNOVER", True)
    booking = await create_booking(db_session, actor_for(other_guest), room.id, day(12), day(14), guests=1)
    assert booking.check_in == day(12)


@pytest.mark.asyncio
async def test_closed_room_cannot_be_booked(db_session, room, guest):
    room.is_available = False
    await db_session.commit()

    with pytest.raises(RoomUnavailable):
        await create_booking(db_session, actor_for(guest), room.id, day(5), day(6), guests=1)


@pytest.mark.asyncio
async def test_concurrent_identical_ranges_at_most_one_succeeds(session_factory, room, guest, other_guest):
    room_id = room.id
    actors = [actor_for(guest), actor_for(other_guest)]

    async def attempt(actor):
        async with session_factory() as session:
            try:
                return await create_booking(session, actor, room_id, day(5), day(7), guests=1)
            except RoomUnavailable:
                return None

    results = await asyncio.gather(*(attempt(a) for a in actors))
    assert sum(r is not None for r in results) == 1

    async with session_factory() as session:
        stored = (await session.execute(select(Booking).where(Booking.room_id == room_id))).scalars().all()
    assert len(stored) == 1


@pytest.mark.asyncio
async def test_many_concurrent_requests_never_double_book(session_factory, db_session, room, guest):
    """Ten guests race for overlapping windows on one room; accepted stays never overlap."""
    users = [guest] + [await make_user(db_session, f"racer_{i}", Role.USER) for i in range(9)]
    room_id = room.id
    windows = [(5 + i % 4, 7 + i % 4) for i in range(len(users))]

    async def attempt(user, window):
        async with session_factory() as session:
            try:
                return await create_booking(session, actor_for(user), room_id, day(window[0]), day(window[1]), 1)
            except RoomUnavailable:
                return None

    results = [r for r in await asyncio.gather(*(attempt(u, w) for u, w in zip(users, windows))) if r]
    assert results
    for i, a in enumerate(results):
        for b in results[i + 1:]:
            assert a.check_out < b.check_in or b.check_out < a.check_in


@pytest.mark.asyncio
async def test_version_conflict_from_another_process_triggers_recheck(session_factory, room, guest, other_guest, monkeypatch):
    """
    Another worker books the same dates between our availability check and
    our claim. The claim misses the version, we re-check and refuse.
    """
    room_id, hotel_id, rival_id = room.id, room.hotel_id, other_guest.id
    original = booking_service.is_range_available
    calls = {"n": 0}

    async def rival_books_first(db, *args, **kwargs):
        available = await original(db, *args, **kwargs)
        calls["n"] += 1
        if calls["n"] == 1:
            async with session_factory() as rival:
                rival.add(Booking(
                    user_id=rival_id, room_id=room_id, hotel_id=hotel_id,
                    check_in=day(5), check_out=day(7), total_price=Decimal("200.00"), guests=1,
                ))
                await rival.execute(update(Room).where(Room.id == room_id).values(version=Room.version + 1))
                await rival.commit()
        return available

    monkeypatch.setattr(booking_service, "is_range_available", rival_books_first)

    async with session_factory() as session:
        with pytest.raises(RoomUnavailable):
            await create_booking(session, actor_for(guest), room_id, day(5), day(7), guests=1)

    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_version_conflict_with_disjoint_rival_retries_and_succeeds(session_factory, room, guest, monkeypatch):
    room_id = room.id
    original = booking_service.is_range_available
    calls = {"n": 0}

    async def rival_bumps_version(db, *args, **kwargs):
        available = await original(db, *args, **kwargs)
        calls["n"] += 1
        if calls["n"] == 1:
            async with session_factory() as rival:
                await rival.execute(update(Room).where(Room.id == room_id).values(version=Room.version + 1))
                await rival.commit()
        return available

    monkeypatch.setattr(booking_service, "is_range_available", rival_bumps_version)

    async with session_factory() as session:
        booking = await create_booking(session, actor_for(guest), room_id, day(20), day(22), guests=1)

    assert booking.id is not None
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_gives_up_after_max_retries(session_factory, room, guest, settings, monkeypatch):
    room_id = room.id
    original = booking_service.is_range_available

    async def always_contended(db, *args, **kwargs):
        available = await original(db, *args, **kwargs)
        async with session_factory() as rival:
            await rival.execute(update(Room).where(Room.id == room_id).values(version=Room.version + 1))
            await rival.commit()
        return available

    monkeypatch.setattr(booking_service, "is_range_available", always_contended)
    monkeypatch.setattr(settings, "BOOKING_MAX_RETRIES", 2)

    async with session_factory() as session:
        with pytest.raises(RoomUnavailable):
            await create_booking(session, actor_for(guest), room_id, day(20), day(22), guests=1)
        stored = (await session.execute(select(Booking))).scalars().all()
    assert stored == []


@pytest.mark.asyncio
async def test_unknown_rooms_leave_no_lock_behind(db_session, guest):
    for room_id in range(100000, 100050):
        with pytest.raises(RoomNotFound):
            await create_booking(db_session, actor_for(guest), room_id, day(5), day(6), guests=1)

    assert active_room_locks() == 0


@pytest.mark.asyncio
async def test_room_lock_is_dropped_after_booking_and_rejection(db_session, room, guest, other_guest):
    await create_booking(db_session, actor_for(guest), room.id, day(5), day(7), guests=1)
    with pytest.raises(RoomUnavailable):
        await create_booking(db_session, actor_for(other_guest), room.id, day(6), day(8), guests=1)

    assert active_room_locks() == 0


@pytest.mark.asyncio
async def test_room_lock_entry_survives_while_someone_waits():
    holder_inside = asyncio.Event()
    release_holder = asyncio.Event()

    async def holder():
        async with room_write_lock(7):
            holder_inside.set()
            await release_holder.wait()

    async def waiter():
        async with room_write_lock(7):
            pass

    first = asyncio.create_task(holder())
    await holder_inside.wait()
    second = asyncio.create_task(waiter())
    await asyncio.sleep(0)
    assert active_room_locks() == 1

    release_holder.set()
    await asyncio.gather(first, second)
    assert active_room_locks() == 0
