"""
Cart error constants and adapter exceptions.

Exceptions here are raised by the catalog/stock client only; the cart engine
turns them into failure results at its operation boundary.
"""

# Failure messages shown to the shopper
ERROR_OUT_OF_STOCK = "Requested quantity is out of stock"
ERROR_INVALID_AMOUNT = "Quantity must be a positive whole number"
ERROR_ADD_PRODUCT = "Could not add the product to the cart"
ERROR_REMOVE_PRODUCT = "Could not remove the product from the cart"
ERROR_UPDATE_AMOUNT = "Could not change the product quantity"
ERROR_SERVICE_UNAVAILABLE = "Shop service is unavailable, try again later"


class CatalogError(Exception):
    """Base error for catalog and stock lookups."""


class ProductNotFoundError(CatalogError):
    """The catalog or stock service has no record for the product."""

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class CatalogUnavailableError(CatalogError):
    """The catalog or stock service could not be reached or answered garbage."""
