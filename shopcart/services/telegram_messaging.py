"""
Telegram message sending with retry and backoff.

Used by TelegramNotifier to push cart failure messages to a chat.
"""

import asyncio

import httpx

from shopcart import config
from shopcart.logging import get_logger

logger = get_logger(__name__)

NO_RESPONSE_BODY = "No response body"
PERMANENT_ERROR_CODES = {400, 403, 404}
MAX_MESSAGE_LENGTH = 4096


def _is_permanent_error(status_code: int) -> bool:
    """Check if error is permanent (no retry needed)."""
    return status_code in PERMANENT_ERROR_CODES


def _calculate_backoff_delay(attempt: int) -> float:
    """Calculate exponential backoff delay."""
    return float(0.5 * (2 ** attempt))


def _truncate_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Truncate message to Telegram's limit."""
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


async def _send_with_retry(
    client: httpx.AsyncClient, url: str, payload: dict, retries: int, timeout: float, chat_id: int
) -> bool:
    """Send request with retry logic."""
    last_error = None

    for attempt in range(retries + 1):
        try:
            response = await client.post(url, json=payload, timeout=timeout)
            if response.status_code == 200:
                logger.debug(f"Message sent successfully to {chat_id}")
                return True

            error_text = response.text[:200] if response.text else NO_RESPONSE_BODY
            logger.warning(f"Telegram API error for {chat_id}: status={response.status_code}, response={error_text}")

            if _is_permanent_error(response.status_code):
                return False

            last_error = f"HTTP {response.status_code}"
        except httpx.TimeoutException:
            last_error = "Timeout"
            logger.warning(f"Timeout sending message to {chat_id} (attempt {attempt + 1}/{retries + 1})")
        except httpx.HTTPError as e:
            last_error = f"Connection error: {e}"
            logger.warning(f"Connection error sending to {chat_id}: {e}")

        if attempt < retries:
            await asyncio.sleep(_calculate_backoff_delay(attempt))

    logger.error(f"Failed to send message to {chat_id} after {retries + 1} attempts: {last_error}")
    return False


async def send_telegram_message(
    chat_id: int,
    text: str,
    bot_token: str | None = None,
    retries: int = 2,
    timeout: float = 10.0,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """
    Send a plain-text Telegram message.

    Args:
        chat_id: Telegram chat ID
        text: Message text
        bot_token: Optional bot token. If not provided, uses TELEGRAM_TOKEN
        retries: Number of retry attempts (default 2)
        timeout: Request timeout in seconds (default 10)
        client: Optional httpx client to reuse

    Returns:
        True if sent successfully, False otherwise
    """
    token = bot_token or config.TELEGRAM_TOKEN
    if not token:
        logger.warning(f"No bot token configured for sending message to {chat_id}")
        return False

    url = f"https://api.telegram.org/bot{token}/sendMessage"
    payload = {"chat_id": chat_id, "text": _truncate_message(text)}

    if client is not None:
        return await _send_with_retry(client, url, payload, retries, timeout, chat_id)
    async with httpx.AsyncClient() as own_client:
        return await _send_with_retry(own_client, url, payload, retries, timeout, chat_id)
