"""
Per-room write serialization inside one worker process.

Booking creation holds the room's lock from the availability check until the
commit, so two requests in the same process can never both pass the check.
Across processes the room version check in booking_service takes over.

A room's entry lives only while some request holds or waits for its lock,
so the registry stays as small as the number of rooms being booked right now.
"""

import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator


class _RoomLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.users = 0


# asyncio locks bind to the loop that first waits on them
_locks_by_loop: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[int, _RoomLock]]" = (
    weakref.WeakKeyDictionary()
)


def _registry() -> dict[int, _RoomLock]:
    return _locks_by_loop.setdefault(asyncio.get_running_loop(), {})


def active_room_locks() -> int:
    """Rooms with a holder or waiter on the current loop."""
    return len(_registry())


@asynccontextmanager
async def room_write_lock(room_id: int) -> AsyncIterator[None]:
    registry = _registry()
    entry = registry.get(room_id)
    if entry is None:
        entry = registry[room_id] = _RoomLock()
    entry.users += 1
    try:
        async with entry.lock:
            yield
    finally:
        entry.users -= 1
        if entry.users == 0:
            registry.pop(room_id, None)
