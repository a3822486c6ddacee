"""
inkconnect/core/cache.py

Async Redis Client, JWT Blacklist and Cache Helpers

- Shared async Redis client (None when Redis is disabled)
- Stores token `jti` (JWT ID) with expiration to invalidate tokens on logout
- Key builders and pattern invalidation for read-through caches
"""

import logging
from typing import Any

import redis.asyncio as redis

from inkconnect.core.config import settings

# ---------------------------------------------------
# Logger Configuration
# ---------------------------------------------------
logger = logging.getLogger(__name__)

# ---------------------------------------------------
# Redis Client Initialization
# ---------------------------------------------------
redis_client: redis.Redis | None = None  # type: ignore[type-arg]

if settings.REDIS_ENABLED:
    try:
        redis_client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
        )
        logger.info(
            f"[REDIS ASYNC] Initialized async Redis client for {settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}"
        )
    except redis.RedisError as e:
        logger.error(f"[REDIS ASYNC] Initialization failed: {e}")
        redis_client = None
else:
    logger.info("[REDIS ASYNC] Redis disabled by configuration.")

# Prefix for all blacklist keys
BLACKLIST_PREFIX = "jwt_blacklist:"

# --- Cache Configuration ---
CACHE_PREFIX = settings.CACHE_PREFIX
DEFAULT_CACHE_TTL = settings.DEFAULT_CACHE_TTL


# ---------------------------------------------------
# Blacklist Management Functions
# ---------------------------------------------------
async def blacklist_token(jti: str, expires_in: int) -> None:
    """
    Blacklist a JWT token by storing its `jti` in Redis with TTL.

    Args:
        jti (str): Unique JWT ID from the token payload.
        expires_in (int): Expiration time in seconds (matches token lifetime).
    """
    if not redis_client:
        logger.warning("[BLACKLIST ASYNC] Redis unavailable: Token not blacklisted.")
        return

    try:
        await redis_client.setex(f"{BLACKLIST_PREFIX}{jti}", expires_in, "true")
        logger.debug(f"[BLACKLIST ASYNC] Token blacklisted: jti={jti} for {expires_in}s")
    except redis.RedisError as e:
        logger.error(f"[BLACKLIST ASYNC] Failed to blacklist token: {e}")


async def is_token_blacklisted(jti: str) -> bool:
    """
    Check if a JWT token ID (`jti`) is blacklisted.

    Returns:
        bool: True if blacklisted, False otherwise.
    """
    if not redis_client:
        return False

    try:
        exists = await redis_client.exists(f"{BLACKLIST_PREFIX}{jti}")
        return exists == 1
    except redis.RedisError as e:
        logger.error(f"[BLACKLIST ASYNC] Failed to check token blacklist status: {e}")
        return False


# ---------------------------------------------------
# Cache Key Helpers
# ---------------------------------------------------
def _cache_key(namespace: str, identifier: Any) -> str:
    """Generate a simple cache key."""
    return f"{CACHE_PREFIX}{namespace}:{identifier}"


def _paginated_cache_key(namespace: str, identifier: Any, skip: int, limit: int) -> str:
    """Generate a cache key for paginated data."""
    return f"{CACHE_PREFIX}{namespace}:{identifier}:skip={skip}:limit={limit}"


async def cache_get(key: str) -> str | None:
    """Read a cached value, treating any Redis failure as a miss."""
    if not redis_client:
        return None
    try:
        return await redis_client.get(key)  # type: ignore[no-any-return]
    except redis.RedisError:
        logger.exception(f"[CACHE] Read error for key {key}")
        return None


async def cache_set(key: str, value: str, ttl: int = DEFAULT_CACHE_TTL) -> None:
    if not redis_client:
        return
    try:
        await redis_client.set(key, value, ex=ttl)
    except redis.RedisError:
        logger.exception(f"[CACHE] Write error for key {key}")


async def invalidate_pattern(pattern: str) -> None:
    """Delete every key matching `pattern` (relative to CACHE_PREFIX)."""
    if not redis_client:
        return
    full_pattern = f"{CACHE_PREFIX}{pattern}"
    try:
        keys = [key async for key in redis_client.scan_iter(match=full_pattern)]
        if keys:
            await redis_client.delete(*keys)
            logger.debug(f"[CACHE] Invalidated {len(keys)} keys matching '{full_pattern}'")
    except redis.RedisError as e:
        logger.error(f"[CACHE] Pattern invalidation failed for '{full_pattern}': {e}")
