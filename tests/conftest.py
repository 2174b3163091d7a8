"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import AsyncMock, Mock

# Set test environment variables
os.environ.setdefault("SHOP_API_URL", "http://shop.test")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")

from shopcart.errors import ProductNotFoundError
from shopcart.services.models import Item
from shopcart.services.notifications import CartNotifier


@pytest.fixture
def stock():
    """Available quantity per product id, editable by tests."""
    return {"1": 5, "2": 3, "3": 0}


@pytest.fixture
def mock_catalog(stock):
    """Mock catalog/stock client backed by the `stock` dict."""
    catalog = Mock()

    async def get_item(product_id):
        if product_id not in stock:
            raise ProductNotFoundError(product_id)
        return Item(id=product_id, title=f"Sneaker {product_id}", price="179.90", image=f"https://img.test/{product_id}.jpg")

    async def get_available(product_id):
        if product_id not in stock:
            raise ProductNotFoundError(product_id)
        return stock[product_id]

    catalog.get_item = AsyncMock(side_effect=get_item)
    catalog.get_available = AsyncMock(side_effect=get_available)
    return catalog


@pytest.fixture
def mock_storage():
    """Mock cart storage that accepts every write."""
    storage = Mock()
    storage.load = AsyncMock(return_value=None)
    storage.save = AsyncMock(return_value=True)
    storage.clear = AsyncMock(return_value=True)
    return storage


@pytest.fixture
def mock_notifier():
    """Mock notification sink"""
    return AsyncMock(spec=CartNotifier)


@pytest.fixture
def mock_redis():
    """Mock Upstash async Redis client with an in-memory dict."""
    data = {}
    redis = Mock()

    async def get(key):
        return data.get(key)

    async def set(key, value, ex=None):
        data[key] = value
        return True

    async def delete(key):
        return 1 if data.pop(key, None) is not None else 0

    redis.get = AsyncMock(side_effect=get)
    redis.set = AsyncMock(side_effect=set)
    redis.delete = AsyncMock(side_effect=delete)
    redis.data = data
    return redis
