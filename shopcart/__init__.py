"""shopcart - session shopping cart kept consistent with a remote stock service."""
