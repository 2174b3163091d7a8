"""
Environment configuration.

All settings are read once at import time from environment variables.
"""

import os
from typing import Optional

# Catalog / stock REST service
SHOP_API_URL = os.environ.get("SHOP_API_URL", "")
SHOP_API_TIMEOUT = float(os.environ.get("SHOP_API_TIMEOUT", "10"))

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# Single snapshot key shared by the whole process
CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "shopcart:cart")


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name, "").strip()
    return int(value) if value else None


# Unset means the snapshot never expires
CART_TTL_SECONDS: Optional[int] = _optional_int("CART_TTL_SECONDS")

# Failure notifications to a Telegram chat (optional)
TELEGRAM_TOKEN = os.environ.get("TELEGRAM_TOKEN", "")
TELEGRAM_NOTIFY_CHAT_ID: Optional[int] = _optional_int("TELEGRAM_NOTIFY_CHAT_ID")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
SHOPCART_ENV = os.environ.get("SHOPCART_ENV", "development")
