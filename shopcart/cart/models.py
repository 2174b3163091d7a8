"""Cart models: immutable lines and the ordered cart value."""
from dataclasses import dataclass, replace
from typing import Iterator, Optional

from shopcart.services.models import Item, normalize_product_id


@dataclass(frozen=True)
class CartLine:
    """A product in the cart with a positive quantity."""
    product_id: str
    amount: int
    item: Optional[Item] = None  # Display snapshot taken when the line was created

    def __post_init__(self):
        if normalize_product_id(self.product_id) != self.product_id:
            raise ValueError(f"invalid product id: {self.product_id!r}")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int) or self.amount < 1:
            raise ValueError("amount must be a positive integer")

    def with_amount(self, amount: int) -> "CartLine":
        return replace(self, amount=amount)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "product_id": self.product_id,
            "amount": self.amount,
            "item": self.item.model_dump(mode="json") if self.item else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """Create from dictionary."""
        item = data.get("item")
        return cls(
            product_id=data["product_id"],
            amount=data["amount"],
            item=Item(**item) if item else None,
        )


@dataclass(frozen=True)
class Cart:
    """
    Ordered, id-unique sequence of cart lines.

    Every helper returns a new Cart; the original is never modified.
    """
    lines: tuple[CartLine, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))
        ids = [line.product_id for line in self.lines]
        if len(ids) != len(set(ids)):
            raise ValueError("cart contains duplicate product ids")

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    @property
    def total_items(self) -> int:
        """Total number of units in cart."""
        return sum(line.amount for line in self.lines)

    def find(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)

    def with_line_amount(self, product_id: str, amount: int) -> "Cart":
        """Replace the amount of an existing line, keeping its position."""
        if self.find(product_id) is None:
            raise KeyError(product_id)
        return Cart(tuple(
            line.with_amount(amount) if line.product_id == product_id else line
            for line in self.lines
        ))

    def appended(self, line: CartLine) -> "Cart":
        """Add a new line at the end."""
        return Cart(self.lines + (line,))

    def without(self, product_id: str) -> "Cart":
        """Drop a line, keeping the order of the rest."""
        return Cart(tuple(line for line in self.lines if line.product_id != product_id))

    def to_dict(self) -> dict:
        """Convert to dictionary for Redis storage."""
        return {"items": [line.to_dict() for line in self.lines]}

    @classmethod
    def from_dict(cls, data: dict) -> "Cart":
        """Create from dictionary."""
        return cls(tuple(CartLine.from_dict(line) for line in data.get("items", [])))
