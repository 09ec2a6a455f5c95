"""
Name: Domain Entities

Responsibilities:
  - Define the Order aggregate (order + delivery + payment + items)
  - Define the stream message envelope and cache entry value objects

Collaborators:
  - None (pure domain layer, no external dependencies)

Constraints:
  - No dependencies on infrastructure or frameworks
  - Simple dataclasses; the core treats Order as an opaque payload keyed by order_uid

Notes:
  - Field names follow the producer's JSON wire format so the codec can map
    them one-to-one
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Delivery:
    """R: Recipient and address of an order."""

    name: str = ""
    phone: str = ""
    zip: str = ""
    city: str = ""
    address: str = ""
    region: str = ""
    email: str = ""


@dataclass
class Payment:
    """R: Payment transaction attached to an order."""

    transaction: str = ""
    request_id: str = ""
    currency: str = ""
    provider: str = ""
    amount: int = 0
    payment_dt: int = 0
    bank: str = ""
    delivery_cost: float = 0.0
    goods_total: float = 0.0
    custom_fee: float = 0.0


@dataclass
class Item:
    """R: One line item of an order."""

    chrt_id: int = 0
    track_number: str = ""
    price: float = 0.0
    rid: str = ""
    name: str = ""
    sale: int = 0
    size: str = ""
    total_price: float = 0.0
    nm_id: int = 0
    brand: str = ""
    status: int = 0


@dataclass
class Order:
    """
    R: The unit of work.

    Attributes:
        order_uid: Unique identifier (non-empty); determines at most one persisted record
        delivery / payment / items: Structured payload
        date_created: Producer-side creation time (optional)
    """

    order_uid: str
    track_number: str = ""
    entry: str = ""
    delivery: Delivery = field(default_factory=Delivery)
    payment: Payment = field(default_factory=Payment)
    items: List[Item] = field(default_factory=list)
    locale: str = ""
    internal_signature: str = ""
    customer_id: str = ""
    delivery_service: str = ""
    shardkey: str = ""
    sm_id: int = 0
    date_created: Optional[datetime] = None
    oof_shard: str = ""


@dataclass(frozen=True)
class CacheEntry:
    """
    R: Cache entry snapshot.

    value is None in presence-only mode, serialized order JSON otherwise.
    created_at is a monotonic clock reading.
    """

    value: Optional[bytes]
    created_at: float

    def is_expired(self, ttl_seconds: float, now: float) -> bool:
        """True if TTL mode is on and this entry is older than the TTL."""
        return ttl_seconds > 0 and (now - self.created_at) > ttl_seconds


@dataclass(frozen=True)
class StreamMessage:
    """R: One delivery from the inbound stream."""

    value: bytes
    key: Optional[bytes] = None
    topic: str = ""
    partition: int = 0
    offset: int = 0
