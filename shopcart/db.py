"""
Redis client for cart snapshots.

Provides a singleton Upstash async Redis client plus the key and TTL
constants used by the cart storage.
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from shopcart import config

_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=config.UPSTASH_REDIS_REST_URL, token=config.UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisKeys:
    """Redis keys used by the cart."""

    # One snapshot per process, overwritten on every commit
    CART = config.CART_STORAGE_KEY


class TTL:
    """Time-to-live constants for Redis keys (seconds, None = no expiry)."""

    CART = config.CART_TTL_SECONDS
