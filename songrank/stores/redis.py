"""Redis store for caching.

Handles:
- Caching with TTL policies
- Leaderboard payload cache (invalidated on every vote)

TTL policies:
- Leaderboard payload: LEADERBOARD_CACHE_TTL seconds (default 30)
"""

import json
import logging
from typing import Any

import redis.asyncio as redis

from songrank.settings import get_settings

# Key prefixes
PREFIX_UI_PAYLOAD = "ui:"
KEY_LEADERBOARD = f"{PREFIX_UI_PAYLOAD}leaderboard"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    try:
        # Validate connectivity early (especially for `rediss://` in production).
        await _redis.ping()
    except Exception:
        await close_redis()
        raise
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


# ============================================================
# Generic cache operations
# ============================================================


async def cache_get(key: str) -> str | None:
    """Get value from cache.

    Args:
        key: Cache key.

    Returns:
        Cached value or None if not found.
    """
    return await _get_redis().get(key)


async def cache_set(key: str, value: str, ttl: int) -> None:
    """Set value in cache with TTL.

    Args:
        key: Cache key.
        value: Value to cache.
        ttl: Time-to-live in seconds.
    """
    await _get_redis().setex(key, ttl, value)


async def cache_delete(key: str) -> None:
    """Delete value from cache.

    Args:
        key: Cache key.
    """
    await _get_redis().delete(key)


async def cache_get_json(key: str) -> dict[str, Any] | None:
    """Get JSON value from cache.

    Args:
        key: Cache key.

    Returns:
        Parsed JSON dict or None if not found.
    """
    value = await cache_get(key)
    if value:
        return json.loads(value)
    return None


async def cache_set_json(key: str, value: dict[str, Any], ttl: int) -> None:
    """Set JSON value in cache.

    Args:
        key: Cache key.
        value: Dict to cache as JSON.
        ttl: Time-to-live in seconds.
    """
    await cache_set(key, json.dumps(value), ttl)


# ============================================================
# Leaderboard cache
# ============================================================


async def get_leaderboard_cache() -> dict[str, Any] | None:
    """Get cached leaderboard payload."""
    return await cache_get_json(KEY_LEADERBOARD)


async def set_leaderboard_cache(payload: dict[str, Any], ttl: int) -> None:
    """Cache leaderboard payload."""
    await cache_set_json(KEY_LEADERBOARD, payload, ttl)


async def invalidate_leaderboard_cache() -> None:
    """Drop the cached leaderboard (ratings changed)."""
    await cache_delete(KEY_LEADERBOARD)
