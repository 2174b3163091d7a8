"""
Shop API client - catalog lookup and stock oracle.

Talks to the shop's REST service:
- GET {base}/products/{id} -> Item
- GET {base}/stock/{id}    -> {"id": ..., "amount": <available>}

Stock is never cached; every call is a fresh request.
"""
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from shopcart import config
from shopcart.errors import CatalogUnavailableError, ProductNotFoundError
from shopcart.logging import get_logger, sanitize_id_for_logging

from .models import Item, StockRecord

logger = get_logger(__name__)


class ShopApiClient:
    """Async client for the catalog and stock endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not base_url:
            raise ValueError("SHOP_API_URL must be set")
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def _get_json(self, path: str, product_id: str) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"Shop API request failed for {sanitize_id_for_logging(product_id)}: {e}")
            raise CatalogUnavailableError(str(e)) from e

        if response.status_code == 404:
            raise ProductNotFoundError(product_id)
        if response.status_code != 200:
            logger.warning(f"Shop API error for {sanitize_id_for_logging(product_id)}: status={response.status_code}")
            raise CatalogUnavailableError(f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogUnavailableError("Malformed response body") from e
        if not isinstance(data, dict):
            raise CatalogUnavailableError("Malformed response body")
        return data

    async def get_item(self, product_id: str) -> Item:
        """Fetch the catalog record for a product."""
        data = await self._get_json(f"/products/{quote(product_id, safe='')}", product_id)
        try:
            item = Item(**data)
        except ValidationError as e:
            raise CatalogUnavailableError(f"Malformed product record: {e}") from e
        if item.id != product_id:
            # Service answered for a different product
            raise ProductNotFoundError(product_id)
        return item

    async def get_available(self, product_id: str) -> int:
        """Fetch the currently available quantity for a product."""
        data = await self._get_json(f"/stock/{quote(product_id, safe='')}", product_id)
        try:
            record = StockRecord(**data)
        except ValidationError as e:
            raise CatalogUnavailableError(f"Malformed stock record: {e}") from e
        if record.id != product_id:
            raise ProductNotFoundError(product_id)
        return record.amount

    async def aclose(self) -> None:
        await self._client.aclose()


_shop_api: Optional[ShopApiClient] = None


def get_shop_api() -> ShopApiClient:
    """Get ShopApiClient singleton."""
    global _shop_api
    if _shop_api is None:
        _shop_api = ShopApiClient(config.SHOP_API_URL, timeout=config.SHOP_API_TIMEOUT)
    return _shop_api
