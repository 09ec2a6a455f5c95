"""
Name: Domain Repository Interfaces

Responsibilities:
  - Define the durable store contract for orders
  - Provide abstraction over storage technology
  - Enable dependency inversion (use cases don't depend on PostgreSQL)

Collaborators:
  - domain.entities: Order
  - Implementations in infrastructure.repositories

Constraints:
  - Pure interfaces (Protocol), no implementation
  - Errors surface as TransientStoreError / StoreTimeoutError

Notes:
  - save_if_absent is what makes ingestion idempotent under at-least-once
    delivery: a second call with the same order_uid is a no-op, not an error
"""

from typing import List, Optional, Protocol

from .entities import Order


class OrderRepository(Protocol):
    """
    R: Interface for order persistence.

    Implementations must provide:
      - Insert-or-ignore persistence keyed by order_uid
      - Point fetch of the full aggregate
      - Key enumeration for warm start
      - Optional serialized-blob mirror
    """

    def save_if_absent(self, order: Order) -> bool:
        """
        R: Persist order unless one with the same order_uid exists.

        Returns:
            True if the order was inserted, False if it already existed
        """
        ...

    def get_order(self, order_uid: str) -> Optional[Order]:
        """
        R: Fetch the full order aggregate.

        Returns:
            Order or None if not found
        """
        ...

    def list_order_uids(self) -> List[str]:
        """R: Return every persisted order identifier."""
        ...

    def cache_blob(self, order_uid: str, data: bytes) -> None:
        """R: Upsert the serialized order into the durable mirror."""
        ...

    def get_blob(self, order_uid: str) -> Optional[bytes]:
        """R: Read the serialized order from the mirror (None if absent)."""
        ...

    def ping(self) -> bool:
        """R: Lightweight connectivity probe for health checks."""
        ...
