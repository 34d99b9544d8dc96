"""
Redis cache for room listings.

Cached:
  - rooms:list:available              public listing of open rooms
  - rooms:list:search:city=..&guests=..  searches without a date range

Searches with dates and everything calendar-related go to the database.
A stale calendar would show a guest dates that were already taken.

Any room creation or availability toggle drops every "rooms:list:*" key.
Keys also expire after REDIS_CACHE_TTL seconds.

Redis is optional: when it is disabled or unreachable every call degrades to
a cache miss and the caller reads from the database.
"""

import json
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

ROOM_LIST_PREFIX = "rooms:list:"
AVAILABLE_ROOMS_KEY = f"{ROOM_LIST_PREFIX}available"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Shared client, created on first use. None when Redis is off or down."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None
    if _redis_client is not None:
        return _redis_client

    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
    )
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        logger.error("redis_connection_failed", url=settings.REDIS_URL, error=str(e))
        await client.aclose()
        return None

    logger.info("redis_connected", url=settings.REDIS_URL)
    _redis_client = client
    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


def search_key(city: Optional[str], guests: int) -> str:
    city_part = (city or "").strip().lower()
    return f"{ROOM_LIST_PREFIX}search:city={city_part}&guests={guests}"


async def get_cached_rooms(key: str = AVAILABLE_ROOMS_KEY) -> Optional[dict]:
    client = await get_redis()
    if client is None:
        return None

    try:
        raw = await client.get(key)
    except RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=raw is not None)
    if raw is None:
        return None
    return json.loads(raw)


async def set_cached_rooms(data: dict, key: str = AVAILABLE_ROOMS_KEY) -> None:
    """Store a JSON-ready listing under key with the configured TTL."""
    client = await get_redis()
    if client is None:
        return

    try:
        await client.set(key, json.dumps(data), ex=settings.REDIS_CACHE_TTL)
    except RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_room_cache() -> None:
    client = await get_redis()
    if client is None:
        return

    try:
        keys = [key async for key in client.scan_iter(match=f"{ROOM_LIST_PREFIX}*", count=100)]
        if keys:
            await client.unlink(*keys)
    except RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))
        return

    record_cache_operation("invalidate", hit=bool(keys))
    logger.info("room_cache_invalidated", keys_deleted=len(keys))


async def get_cache_stats() -> dict:
    """Keyspace hit rate for /health."""
    client = await get_redis()
    if client is None:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
    except RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
