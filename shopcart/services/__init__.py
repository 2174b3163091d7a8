"""External collaborators of the cart: catalog, stock and notifications."""
from .catalog import ShopApiClient, get_shop_api
from .models import Item, StockRecord, normalize_product_id
from .notifications import (
    CartFailure,
    CartNotifier,
    CartOperation,
    FailureKind,
    LoggingNotifier,
    TelegramNotifier,
    failure_message,
)

__all__ = [
    "ShopApiClient",
    "get_shop_api",
    "Item",
    "StockRecord",
    "normalize_product_id",
    "CartFailure",
    "CartNotifier",
    "CartOperation",
    "FailureKind",
    "LoggingNotifier",
    "TelegramNotifier",
    "failure_message",
]
