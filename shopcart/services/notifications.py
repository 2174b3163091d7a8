"""
Notification sink for cart operation failures.

The engine reports every failed operation exactly once through a CartNotifier.
Notifiers are one-way: they return nothing and their own errors never reach
the engine.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from shopcart import config
from shopcart.errors import (
    ERROR_ADD_PRODUCT,
    ERROR_INVALID_AMOUNT,
    ERROR_OUT_OF_STOCK,
    ERROR_REMOVE_PRODUCT,
    ERROR_SERVICE_UNAVAILABLE,
    ERROR_UPDATE_AMOUNT,
)
from shopcart.logging import get_logger, sanitize_id_for_logging

from .telegram_messaging import send_telegram_message

logger = get_logger(__name__)


class FailureKind(str, Enum):
    """Why a cart operation was refused."""
    NOT_FOUND = "not_found"
    OUT_OF_STOCK = "out_of_stock"
    INVALID_AMOUNT = "invalid_amount"
    UNAVAILABLE = "unavailable"  # catalog/stock service unreachable


class CartOperation(str, Enum):
    """Cart mutation that produced a result."""
    ADD = "add"
    REMOVE = "remove"
    SET_AMOUNT = "set_amount"


@dataclass(frozen=True)
class CartFailure:
    """A refused operation, as delivered to the notification sink."""
    operation: CartOperation
    kind: FailureKind
    product_id: Optional[str] = None


_OPERATION_ERRORS = {
    CartOperation.ADD: ERROR_ADD_PRODUCT,
    CartOperation.REMOVE: ERROR_REMOVE_PRODUCT,
    CartOperation.SET_AMOUNT: ERROR_UPDATE_AMOUNT,
}


def failure_message(failure: CartFailure) -> str:
    """Human-readable text for a failure."""
    if failure.kind == FailureKind.OUT_OF_STOCK:
        return ERROR_OUT_OF_STOCK
    if failure.kind == FailureKind.INVALID_AMOUNT:
        return ERROR_INVALID_AMOUNT
    if failure.kind == FailureKind.UNAVAILABLE:
        return ERROR_SERVICE_UNAVAILABLE
    return _OPERATION_ERRORS[failure.operation]


class CartNotifier(ABC):
    """Receives failure signals from the cart engine."""

    @abstractmethod
    async def notify(self, failure: CartFailure) -> None:
        """Deliver a failure signal. Must not raise."""


class LoggingNotifier(CartNotifier):
    """Default sink: writes the failure message to the log."""

    async def notify(self, failure: CartFailure) -> None:
        logger.warning(
            f"Cart {failure.operation.value} failed ({failure.kind.value}) "
            f"for product {sanitize_id_for_logging(failure.product_id)}: {failure_message(failure)}"
        )


class TelegramNotifier(CartNotifier):
    """Sends failure messages to a Telegram chat."""

    def __init__(self, chat_id: Optional[int] = None, bot_token: Optional[str] = None):
        self.chat_id = chat_id if chat_id is not None else config.TELEGRAM_NOTIFY_CHAT_ID
        self.bot_token = bot_token

    async def notify(self, failure: CartFailure) -> None:
        if self.chat_id is None:
            logger.warning("TELEGRAM_NOTIFY_CHAT_ID not set, dropping cart notification")
            return
        try:
            await send_telegram_message(self.chat_id, failure_message(failure), bot_token=self.bot_token)
        except Exception:
            logger.exception(f"Failed to deliver cart notification to {self.chat_id}")
