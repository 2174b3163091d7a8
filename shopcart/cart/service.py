"""
Cart engine: stock-checked mutations over a single cart value.

Each operation returns a CartResult instead of raising. On success the new
cart is committed and written through to storage; on failure the cart and
the stored snapshot are left untouched and the notifier gets exactly one
signal.
"""
import asyncio
from dataclasses import dataclass
from typing import Optional

from shopcart.errors import CatalogUnavailableError, ProductNotFoundError
from shopcart.logging import get_logger, sanitize_id_for_logging
from shopcart.services.catalog import get_shop_api
from shopcart.services.models import normalize_product_id
from shopcart.services.notifications import (
    CartFailure,
    CartNotifier,
    CartOperation,
    FailureKind,
    LoggingNotifier,
)

from .models import Cart, CartLine
from .storage import RedisCartStorage

logger = get_logger(__name__)


@dataclass(frozen=True)
class CartResult:
    """Outcome of a cart operation: the cart after the call, plus the failure if any."""
    cart: Cart
    failure: Optional[CartFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class _Refused(Exception):
    """Internal: aborts an operation with a failure kind."""

    def __init__(self, kind: FailureKind):
        super().__init__(kind.value)
        self.kind = kind


class CartEngine:
    """
    Single holder of the session cart.

    Features:
    - add / remove / set_amount checked against live stock
    - immutable read view via `cart`
    - write-through persistence after every commit
    - mutations serialized on an asyncio.Lock, so concurrent callers are
      applied one after another in arrival order
    """

    def __init__(self, catalog, storage, notifier: Optional[CartNotifier] = None, initial: Optional[Cart] = None):
        self._catalog = catalog
        self._storage = storage
        self._notifier = notifier or LoggingNotifier()
        self._cart = initial if initial is not None else Cart()
        self._lock = asyncio.Lock()

    @classmethod
    async def restore(cls, catalog, storage, notifier: Optional[CartNotifier] = None) -> "CartEngine":
        """Build an engine from the last stored snapshot (empty if none)."""
        snapshot = await storage.load()
        if snapshot is not None:
            logger.info(f"Restored cart with {len(snapshot)} line(s)")
        return cls(catalog, storage, notifier, initial=snapshot)

    @property
    def notifier(self) -> CartNotifier:
        return self._notifier

    @property
    def cart(self) -> Cart:
        """Current cart. Never triggers I/O."""
        return self._cart

    async def add(self, product_id) -> CartResult:
        """Add one unit of a product, creating its line at the end if needed."""
        async with self._lock:
            pid = normalize_product_id(product_id)
            try:
                if pid is None:
                    raise _Refused(FailureKind.NOT_FOUND)
                item = await self._lookup(self._catalog.get_item, pid)
                if item.id != pid:
                    raise _Refused(FailureKind.NOT_FOUND)
                available = await self._lookup(self._catalog.get_available, pid)

                line = self._cart.find(pid)
                if line is not None:
                    if available < line.amount + 1:
                        raise _Refused(FailureKind.OUT_OF_STOCK)
                    new_cart = self._cart.with_line_amount(pid, line.amount + 1)
                else:
                    if available < 1:
                        raise _Refused(FailureKind.OUT_OF_STOCK)
                    new_cart = self._cart.appended(CartLine(product_id=pid, amount=1, item=item))
            except _Refused as e:
                return await self._fail(CartOperation.ADD, e.kind, pid or product_id)

            return await self._commit(new_cart)

    async def remove(self, product_id) -> CartResult:
        """Remove a product's line entirely."""
        async with self._lock:
            pid = normalize_product_id(product_id)
            if pid is None or self._cart.find(pid) is None:
                return await self._fail(CartOperation.REMOVE, FailureKind.NOT_FOUND, pid or product_id)
            return await self._commit(self._cart.without(pid))

    async def set_amount(self, product_id, amount) -> CartResult:
        """Set an existing line's amount to exactly `amount`. Never creates a line."""
        async with self._lock:
            pid = normalize_product_id(product_id)
            try:
                if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
                    raise _Refused(FailureKind.INVALID_AMOUNT)
                if pid is None:
                    raise _Refused(FailureKind.NOT_FOUND)

                available = await self._lookup(self._catalog.get_available, pid)
                if available < amount:
                    raise _Refused(FailureKind.OUT_OF_STOCK)
                if self._cart.find(pid) is None:
                    raise _Refused(FailureKind.NOT_FOUND)
            except _Refused as e:
                return await self._fail(CartOperation.SET_AMOUNT, e.kind, pid or product_id)

            return await self._commit(self._cart.with_line_amount(pid, amount))

    async def clear(self) -> CartResult:
        """Empty the cart and drop the stored snapshot."""
        async with self._lock:
            self._cart = Cart()
            if not await self._storage.clear():
                logger.warning("Cart cleared in memory but stored snapshot was not removed")
            return CartResult(cart=self._cart)

    async def _lookup(self, fetch, pid: str):
        """Run a catalog/stock call, mapping its errors to failure kinds."""
        try:
            return await fetch(pid)
        except ProductNotFoundError:
            raise _Refused(FailureKind.NOT_FOUND)
        except CatalogUnavailableError as e:
            logger.warning(f"Shop service unavailable for {sanitize_id_for_logging(pid)}: {e}")
            raise _Refused(FailureKind.UNAVAILABLE)
        except Exception:
            logger.exception(f"Unexpected error looking up product {sanitize_id_for_logging(pid)}")
            raise _Refused(FailureKind.UNAVAILABLE)

    async def _commit(self, new_cart: Cart) -> CartResult:
        self._cart = new_cart
        # Best-effort durability: a failed write does not fail the operation
        try:
            saved = await self._storage.save(new_cart)
        except Exception:
            logger.exception("Cart storage raised during write-through")
            saved = False
        if not saved:
            logger.warning("Cart committed but snapshot was not persisted")
        return CartResult(cart=new_cart)

    async def _fail(self, operation: CartOperation, kind: FailureKind, product_id) -> CartResult:
        failure = CartFailure(
            operation=operation,
            kind=kind,
            product_id=None if product_id is None else str(product_id),
        )
        try:
            await self._notifier.notify(failure)
        except Exception:
            logger.exception("Cart notifier raised")
        return CartResult(cart=self._cart, failure=failure)


# Singleton instance
_cart_engine: Optional[CartEngine] = None
_engine_lock: Optional[asyncio.Lock] = None


def _get_lock() -> asyncio.Lock:
    global _engine_lock
    if _engine_lock is None:
        _engine_lock = asyncio.Lock()
    return _engine_lock


async def get_cart_engine(notifier: Optional[CartNotifier] = None) -> CartEngine:
    """
    Get CartEngine singleton, restoring it from Redis on first use.

    Uses the configured shop API client and Redis storage. The notifier is
    bound on first use only; passing a different one later raises ValueError.
    """
    global _cart_engine
    if _cart_engine is None:
        async with _get_lock():
            if _cart_engine is None:
                _cart_engine = await CartEngine.restore(get_shop_api(), RedisCartStorage(), notifier)
                return _cart_engine

    if notifier is not None and notifier is not _cart_engine.notifier:
        raise ValueError("Cart engine already initialized with a different notifier")
    return _cart_engine
