"""Redis store for caching and distributed locks.

Handles:
- Caching with TTL policies
- Distributed locks (one digest run per window across replicas)

TTL policies:
- Team membership lookups: 1 hour
- Unique tag / author name lists: 5 minutes
- Digest window lock: 2 days
"""

import json
import logging
from typing import Any

import redis.asyncio as redis

from sharenow.settings import get_settings

# TTL constants (in seconds)
TTL_TEAM_MEMBER = 3600  # 1 hour
TTL_POST_LISTS = 300  # 5 minutes
TTL_DIGEST_LOCK = 172800  # 2 days

# Key prefixes
PREFIX_TEAM_MEMBER = "team_member:"
PREFIX_UNIQUE_TAGS = "posts:unique_tags:"
PREFIX_AUTHOR_NAMES = "posts:authors:"
PREFIX_LOCK = "lock:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    client = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await client.ping()
    _redis = client
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


async def cache_delete_prefix(prefix: str) -> int:
    """Delete every key under a prefix. Returns the number of keys removed."""
    client = _get_redis()
    removed = 0
    async for key in client.scan_iter(match=f"{prefix}*"):
        removed += await client.delete(key)
    return removed


async def cache_get_json(key: str) -> Any | None:
    """Get JSON value from cache.

    Args:
        key: Cache key.

    Returns:
        Parsed JSON value or None if not found.
    """
    value = await cache_get(key)
    if value:
        return json.loads(value)
    return None


async def cache_set_json(key: str, value: Any, ttl: int) -> None:
    """Set JSON value in cache.

    Args:
        key: Cache key.
        value: JSON-serializable value.
        ttl: Time-to-live in seconds.
    """
    await cache_set(key, json.dumps(value), ttl)


# ============================================================
# Team membership cache
# ============================================================


async def get_team_member_cache(team_id: str, user_aad_id: str) -> bool | None:
    """Get cached membership decision for (team, user), or None if unknown."""
    value = await cache_get(f"{PREFIX_TEAM_MEMBER}{team_id}:{user_aad_id}")
    if value is None:
        return None
    return value == "1"


async def set_team_member_cache(team_id: str, user_aad_id: str, is_member: bool) -> None:
    """Cache membership decision for (team, user) for one hour."""
    await cache_set(
        f"{PREFIX_TEAM_MEMBER}{team_id}:{user_aad_id}",
        "1" if is_member else "0",
        TTL_TEAM_MEMBER,
    )


# ============================================================
# Post list caches (unique tags, author names)
# ============================================================


async def get_unique_tags_cache(search_text: str) -> list[str] | None:
    return await cache_get_json(f"{PREFIX_UNIQUE_TAGS}{search_text}")


async def set_unique_tags_cache(search_text: str, tags: list[str]) -> None:
    await cache_set_json(f"{PREFIX_UNIQUE_TAGS}{search_text}", tags, TTL_POST_LISTS)


async def get_author_names_cache(key: str) -> list[str] | None:
    return await cache_get_json(f"{PREFIX_AUTHOR_NAMES}{key}")


async def set_author_names_cache(key: str, names: list[str]) -> None:
    await cache_set_json(f"{PREFIX_AUTHOR_NAMES}{key}", names, TTL_POST_LISTS)


async def invalidate_post_list_caches() -> None:
    """Drop tag and author lists after a post is created, edited or removed."""
    await cache_delete_prefix(PREFIX_UNIQUE_TAGS)
    await cache_delete_prefix(PREFIX_AUTHOR_NAMES)


# ============================================================
# Distributed locks
# ============================================================


async def acquire_lock(key: str, ttl: int = TTL_DIGEST_LOCK) -> bool:
    """Acquire a distributed lock.

    Args:
        key: Lock key (e.g., "digest:Weekly:2026-10-19").
        ttl: Lock timeout in seconds.

    Returns:
        True if lock acquired, False if already locked.
    """
    lock_key = f"{PREFIX_LOCK}{key}"
    # SET NX (only if not exists) with TTL
    result = await _get_redis().set(lock_key, "1", nx=True, ex=ttl)
    return result is not None


async def release_lock(key: str) -> None:
    """Release a distributed lock.

    Args:
        key: Lock key.
    """
    await cache_delete(f"{PREFIX_LOCK}{key}")
