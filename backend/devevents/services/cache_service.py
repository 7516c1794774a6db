"""
Redis caching service for the event listing.

CACHING STRATEGY
================

What we cache:
  - The full event listing (JSON-serialized EventResponse dicts)
  - Cache key: "events:list:all"

Why:
  - The listing page is the most frequent read and has no filters
  - Events change rarely (only on create/update)

Invalidation strategy:
  - On event creation or update: delete every "events:list:*" key
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

Bookings do not touch the listing, so they never invalidate it.

Redis is optional: when disabled or unreachable every call degrades to a
no-op and the listing is read from the database.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis
from devevents.core.config import get_settings
from devevents.core.logging import get_logger
from devevents.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

EVENT_LIST_KEY = "events:list:all"
EVENT_LIST_PATTERN = "events:list:*"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def get_cached_events() -> Optional[list[dict[str, Any]]]:
    """Retrieve the cached event listing, if any."""
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(EVENT_LIST_KEY)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=EVENT_LIST_KEY)
            return json.loads(data)
        logger.debug("cache_miss", key=EVENT_LIST_KEY)
    except Exception as e:
        logger.error("cache_get_error", key=EVENT_LIST_KEY, error=str(e))

    return None


async def set_cached_events(data: list[dict[str, Any]]) -> None:
    """Cache the event listing with TTL."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(EVENT_LIST_KEY, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=EVENT_LIST_KEY, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=EVENT_LIST_KEY, error=str(e))


async def invalidate_event_cache() -> None:
    """Delete every cached event listing key."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=EVENT_LIST_PATTERN, count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
