"""Tests for the shop API client"""
import json
from decimal import Decimal

import httpx
import pytest

from shopcart.errors import CatalogUnavailableError, ProductNotFoundError
from shopcart.services.catalog import ShopApiClient
from shopcart.services.models import normalize_product_id

PRODUCTS = {
    "1": {"id": 1, "title": "Tênis de Caminhada", "price": 179.9, "image": "https://img.test/1.jpg"},
}
STOCK = {
    "1": {"id": 1, "amount": 3},
    "2": {"id": 2, "amount": -1},
}


def _handler(request: httpx.Request) -> httpx.Response:
    _, resource, product_id = request.url.path.split("/")
    table = PRODUCTS if resource == "products" else STOCK
    if product_id == "garbage":
        return httpx.Response(200, text="<html>")
    if product_id not in table:
        return httpx.Response(404, json={})
    return httpx.Response(200, content=json.dumps(table[product_id]))


@pytest.fixture
def shop_api():
    client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    return ShopApiClient("http://shop.test/", client=client)


@pytest.mark.asyncio
async def test_get_item(shop_api):
    item = await shop_api.get_item("1")

    assert item.id == "1"
    assert item.price == Decimal("179.9")


@pytest.mark.asyncio
async def test_get_available(shop_api):
    assert await shop_api.get_available("1") == 3


@pytest.mark.asyncio
async def test_missing_product(shop_api):
    with pytest.raises(ProductNotFoundError):
        await shop_api.get_item("42")
    with pytest.raises(ProductNotFoundError):
        await shop_api.get_available("42")


@pytest.mark.asyncio
async def test_negative_stock_is_malformed(shop_api):
    with pytest.raises(CatalogUnavailableError):
        await shop_api.get_available("2")


@pytest.mark.asyncio
async def test_non_json_body(shop_api):
    with pytest.raises(CatalogUnavailableError):
        await shop_api.get_item("garbage")


@pytest.mark.asyncio
async def test_server_error():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    shop_api = ShopApiClient("http://shop.test", client=client)

    with pytest.raises(CatalogUnavailableError):
        await shop_api.get_available("1")


@pytest.mark.asyncio
async def test_transport_error():
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    shop_api = ShopApiClient("http://shop.test", client=httpx.AsyncClient(transport=httpx.MockTransport(fail)))

    with pytest.raises(CatalogUnavailableError):
        await shop_api.get_item("1")


def test_requires_base_url():
    with pytest.raises(ValueError):
        ShopApiClient("")


@pytest.mark.asyncio
async def test_record_for_other_product_is_not_found():
    def handler(request):
        if request.url.path.startswith("/products/"):
            return httpx.Response(200, json={"id": 1, "title": "Sneaker", "price": 10})
        return httpx.Response(200, json={"id": 1, "amount": 4})

    shop_api = ShopApiClient("http://shop.test", client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    with pytest.raises(ProductNotFoundError):
        await shop_api.get_item("1-b")
    with pytest.raises(ProductNotFoundError):
        await shop_api.get_available("1-b")


@pytest.mark.parametrize("value,expected", [
    (1, "1"),
    ("sku-42_A", "sku-42_A"),
    ("1#x", None),
    ("1?y", None),
    ("1%2F", None),
    ("../1", None),
    ("1.json", None),
    ("", None),
    (0, None),
    (True, None),
])
def test_normalize_product_id(value, expected):
    assert normalize_product_id(value) == expected
