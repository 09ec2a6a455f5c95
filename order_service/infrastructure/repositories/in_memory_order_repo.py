"""
Name: In-Memory Order Repository

Responsibilities:
  - Store orders and mirrored blobs in memory (tests / local dev)
  - Mirror the insert-or-ignore semantics of the PostgreSQL repository
  - Record call counts and inject failures for tests

Collaborators:
  - domain.repositories.OrderRepository (contract implemented)
  - exceptions.TransientStoreError

Constraints:
  - Thread-safe: access guarded by a Lock
  - Returns copies; callers never share mutable state with the store
"""

import copy
from collections import Counter
from threading import Lock
from typing import Dict, List, Optional, Set

from ...domain.entities import Order
from ...exceptions import TransientStoreError


class InMemoryOrderRepository:
    """
    Thread-safe in-memory OrderRepository.

    fail_operations holds operation names that should raise
    TransientStoreError (e.g. {"save_if_absent"}).
    """

    def __init__(self, orders: Optional[List[Order]] = None) -> None:
        self._lock = Lock()
        self._orders: Dict[str, Order] = {}
        self._blobs: Dict[str, bytes] = {}
        self.calls: Counter = Counter()
        self.fail_operations: Set[str] = set()
        for order in orders or []:
            self._orders[order.order_uid] = copy.deepcopy(order)

    def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        if operation in self.fail_operations:
            raise TransientStoreError(f"Simulated failure in {operation}")

    def save_if_absent(self, order: Order) -> bool:
        with self._lock:
            self._enter("save_if_absent")
            if order.order_uid in self._orders:
                return False
            self._orders[order.order_uid] = copy.deepcopy(order)
            return True

    def get_order(self, order_uid: str) -> Optional[Order]:
        with self._lock:
            self._enter("get_order")
            order = self._orders.get(order_uid)
            return copy.deepcopy(order) if order is not None else None

    def list_order_uids(self) -> List[str]:
        with self._lock:
            self._enter("list_order_uids")
            return sorted(self._orders)

    def cache_blob(self, order_uid: str, data: bytes) -> None:
        with self._lock:
            self._enter("cache_blob")
            self._blobs[order_uid] = bytes(data)

    def get_blob(self, order_uid: str) -> Optional[bytes]:
        with self._lock:
            self._enter("get_blob")
            return self._blobs.get(order_uid)

    def ping(self) -> bool:
        with self._lock:
            self._enter("ping")
            return True

    def count(self) -> int:
        """R: Number of persisted orders (test helper)."""
        with self._lock:
            return len(self._orders)

    def put_blob(self, order_uid: str, data: bytes) -> None:
        """R: Seed the mirror without counting a call (test helper)."""
        with self._lock:
            self._blobs[order_uid] = bytes(data)
