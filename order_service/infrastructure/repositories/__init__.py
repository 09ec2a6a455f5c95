"""Order repository implementations."""

from .in_memory_order_repo import InMemoryOrderRepository
from .postgres_order_repo import PostgresOrderRepository

__all__ = ["InMemoryOrderRepository", "PostgresOrderRepository"]
