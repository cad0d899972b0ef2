"""Error kinds raised while handling an order request.

Every error is terminal for the request that raised it: the request is
abandoned and reported, nothing is published, and the service keeps waiting
for the next order.
"""

from __future__ import annotations


class OrderOptimizerError(Exception):
    """Base class for request-terminating failures."""


class ConfigSourceUnavailable(OrderOptimizerError):
    """The data root is not a directory of records."""


class RecordFormatError(ConfigSourceUnavailable):
    """A configuration or order file could not be parsed."""


class ConfigurationMissing(OrderOptimizerError):
    """No product configuration has been loaded."""


class PositionUnknown(OrderOptimizerError):
    """No robot position has been received yet."""


class OrderNotFound(OrderOptimizerError):
    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order {order_id} not found!")
        self.order_id = order_id


class DuplicateOrderError(OrderOptimizerError):
    def __init__(self, order_id: int, sources: list[str]) -> None:
        super().__init__(f"Order {order_id} found in several order files: {', '.join(sources)}")
        self.order_id = order_id
        self.sources = sources


class ProductNotConfigured(OrderOptimizerError):
    def __init__(self, product_key: str, message: str | None = None) -> None:
        super().__init__(message or f"Product '{product_key}' is not configured!")
        self.product_key = product_key


class ProductKeyParseError(ProductNotConfigured):
    """An order lists a product id that is not an integer."""

    def __init__(self, product_key: str) -> None:
        super().__init__(product_key, f"Product id '{product_key}' is not a valid integer!")
