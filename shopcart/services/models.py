"""Catalog models - Pydantic models for catalog and stock records."""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, field_validator

# Ids end up as a URL path segment; anything outside this set could alias another product
PRODUCT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def normalize_product_id(value) -> Optional[str]:
    """
    Return the canonical string form of a product id, or None if invalid.

    Positive ints and non-empty strings of letters, digits, "_" and "-" are accepted.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value) if value > 0 else None
    if isinstance(value, str) and PRODUCT_ID_PATTERN.fullmatch(value):
        return value
    return None


def _coerce_id(v):
    product_id = normalize_product_id(v)
    if product_id is None:
        raise ValueError(f"invalid product id: {v!r}")
    return product_id


class Item(BaseModel):
    """Catalog record. Display attributes are opaque to the cart."""
    id: str
    title: str = ""
    price: Decimal = Decimal("0")
    image: Optional[str] = None

    class Config:
        extra = "ignore"  # Catalog rows carry extra columns
        frozen = True

    @field_validator("id", mode="before")
    @classmethod
    def convert_id(cls, v):
        return _coerce_id(v)

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        if v is None:
            return Decimal("0")
        try:
            # Via str to avoid float precision issues
            return Decimal(str(v)) if isinstance(v, float) else Decimal(v)
        except (InvalidOperation, ValueError, TypeError) as e:
            raise ValueError(f"invalid price: {v!r}") from e


class StockRecord(BaseModel):
    """Available quantity reported by the stock service."""
    id: str
    amount: int

    class Config:
        extra = "ignore"
        frozen = True

    @field_validator("id", mode="before")
    @classmethod
    def convert_id(cls, v):
        return _coerce_id(v)

    @field_validator("amount")
    @classmethod
    def amount_not_negative(cls, v):
        if v < 0:
            raise ValueError("stock amount cannot be negative")
        return v
