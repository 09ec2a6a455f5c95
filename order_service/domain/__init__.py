"""Domain layer: entities and ports (no infrastructure imports)."""

from .cache import OrderCache
from .entities import CacheEntry, Delivery, Item, Order, Payment, StreamMessage
from .repositories import OrderRepository
from .services import OrderMessageStream

__all__ = [
    "CacheEntry",
    "Delivery",
    "Item",
    "Order",
    "OrderCache",
    "OrderMessageStream",
    "OrderRepository",
    "Payment",
    "StreamMessage",
]
