"""Redis persistence for the cart snapshot."""
import json
from typing import Optional

from shopcart.db import TTL, RedisKeys, get_redis
from shopcart.logging import get_logger

from .models import Cart

logger = get_logger(__name__)


class RedisCartStorage:
    """
    Single cart snapshot stored under one fixed key.

    Reads and writes never raise: a failed load yields None and a failed
    save yields False, both logged.
    """

    def __init__(self, redis=None, key: str = RedisKeys.CART, ttl: Optional[int] = TTL.CART):
        self._redis = redis  # Lazy initialization when not injected
        self.key = key
        self.ttl = ttl

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def load(self) -> Optional[Cart]:
        """Read the last saved cart, or None if there is none."""
        try:
            data = await self.redis.get(self.key)
        except Exception as e:
            logger.error(f"Failed to load cart from Redis: {e}")
            return None

        if not data:
            return None

        try:
            return Cart.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            # Corrupted data - clear it and start empty
            logger.warning(f"Corrupted cart snapshot under {self.key}: {e}")
            await self.clear()
            return None

    async def save(self, cart: Cart) -> bool:
        """Overwrite the snapshot with the given cart."""
        try:
            payload = json.dumps(cart.to_dict())
            if self.ttl:
                await self.redis.set(self.key, payload, ex=self.ttl)
            else:
                await self.redis.set(self.key, payload)
            return True
        except Exception as e:
            logger.error(f"Failed to save cart to Redis: {e}")
            return False

    async def clear(self) -> bool:
        """Delete the snapshot."""
        try:
            await self.redis.delete(self.key)
            return True
        except Exception as e:
            logger.error(f"Failed to clear cart from Redis: {e}")
            return False
