"""Cart package: models, storage, and engine."""
from .models import Cart, CartLine
from .service import CartEngine, CartResult, get_cart_engine
from .storage import RedisCartStorage

__all__ = [
    "Cart",
    "CartLine",
    "CartEngine",
    "CartResult",
    "RedisCartStorage",
    "get_cart_engine",
]
