"""Route group exports."""

from . import health, orders, position

__all__ = ["health", "orders", "position"]
