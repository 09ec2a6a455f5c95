"""Application use cases"""

from .ingest_order import IngestOrderUseCase
from .lookup_order import LookupOrderInput, LookupOrderUseCase
from .order_results import (
    IngestOrderResult,
    IngestOutcome,
    LookupOrderResult,
    OrderError,
    OrderErrorCode,
    OrderSource,
    WarmStartReport,
)
from .warm_start import WarmStartLoader

__all__ = [
    "IngestOrderResult",
    "IngestOrderUseCase",
    "IngestOutcome",
    "LookupOrderInput",
    "LookupOrderResult",
    "LookupOrderUseCase",
    "OrderError",
    "OrderErrorCode",
    "OrderSource",
    "WarmStartLoader",
    "WarmStartReport",
]
