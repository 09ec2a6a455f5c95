"""
Name: Order Use Case Results

Responsibilities:
  - Provide consistent error/result types for ingestion, lookup and warm start
"""

from dataclasses import dataclass
from enum import Enum

from ...domain.entities import Order
from ...exceptions import OrderServiceError


class OrderErrorCode(str, Enum):
    """R: Client-facing error codes for order use cases."""

    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"


@dataclass
class OrderError:
    code: OrderErrorCode
    message: str
    resource: str | None = None


class IngestOutcome(str, Enum):
    """R: Terminal states of one ingested record."""

    MALFORMED = "malformed"
    DUPLICATE = "duplicate"
    FAILED = "failed"
    CACHED = "cached"


@dataclass
class IngestOrderResult:
    outcome: IngestOutcome
    acknowledge: bool
    order_uid: str | None = None
    error: OrderServiceError | None = None


class OrderSource(str, Enum):
    CACHE = "cache"
    STORE = "store"


@dataclass
class LookupOrderResult:
    order_uid: str | None = None
    order: Order | None = None
    source: OrderSource | None = None
    error: OrderError | None = None


@dataclass
class WarmStartReport:
    total: int = 0
    loaded: int = 0
    failed: int = 0
    from_mirror: int = 0
