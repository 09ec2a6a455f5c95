"""
Name: Order Cache Port

Responsibilities:
  - Define the contract for the in-process order cache
  - Enable dependency inversion: use cases depend on this Protocol,
    infrastructure/cache.py provides the implementation

Collaborators:
  - infrastructure/cache.FingerprintCache: production implementation
  - application/use_cases: ingest, lookup, warm start

Constraints:
  - Domain module: no threading or infrastructure imports
  - Cache operations never raise and never block on I/O

Notes:
  - Absence in the cache never means absence in the store
"""

from typing import Dict, Optional, Protocol, Tuple

from .entities import CacheEntry


class OrderCache(Protocol):
    """
    R: Interface for the order cache.

    Semantics:
      - set(key, value) inserts or fully replaces an entry
      - has/get report expired entries as absent
      - delete is idempotent
    """

    def set(self, key: str, value: Optional[bytes] = None) -> None:
        ...

    def has(self, key: str) -> bool:
        ...

    def get(self, key: str) -> Tuple[Optional[bytes], bool]:
        """
        R: Return (value, found).

        value is None when not found or when the cache runs in presence-only mode.
        """
        ...

    def delete(self, key: str) -> None:
        ...

    def dump(self) -> Dict[str, CacheEntry]:
        """R: Read-only snapshot of live (non-expired) entries."""
        ...
