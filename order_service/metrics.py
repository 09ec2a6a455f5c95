"""
Name: Prometheus Metrics

Responsibilities:
  - Define and expose Prometheus metrics
  - Provide /metrics endpoint handler
  - Record request latency/count, cache lookups, ingest outcomes and
    warm-start progress

Collaborators:
  - middleware.py: Records request metrics
  - infrastructure/cache.py: cache hit/miss/expired and size
  - application/use_cases: ingest outcomes, warm start keys

Constraints:
  - Low cardinality labels only (endpoint, method, status, outcome - NOT order_uid)

Notes:
  - Metrics live in a private CollectorRegistry so tests can import the
    module repeatedly without duplicate-registration errors
"""

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

# R: Request counter with endpoint and status labels
_requests_total = Counter(
    "order_requests_total",
    "Total HTTP requests",
    ["endpoint", "method", "status"],
    registry=_registry,
)

# R: Request latency histogram (seconds)
# Buckets: 1ms .. 5s (cache hits are sub-millisecond, store reads bounded by 5s)
_request_latency = Histogram(
    "order_request_latency_seconds",
    "HTTP request latency in seconds",
    ["endpoint", "method"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=_registry,
)

_cache_lookups_total = Counter(
    "order_cache_lookups_total",
    "Cache lookups by result",
    ["result"],
    registry=_registry,
)

_cache_size = Gauge(
    "order_cache_entries",
    "Entries currently held by the order cache (including not yet swept)",
    registry=_registry,
)

_ingest_total = Counter(
    "order_ingest_total",
    "Ingested stream records by outcome",
    ["outcome"],
    registry=_registry,
)

_warm_start_keys_total = Counter(
    "order_warm_start_keys_total",
    "Keys processed by the warm-start loader",
    ["result"],
    registry=_registry,
)


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """
    R: Record HTTP request metrics.

    Args:
        endpoint: Request path (e.g., "/order")
        method: HTTP method (e.g., "GET")
        status_code: Response status code
        latency_seconds: Request duration in seconds
    """
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized,
        method=method,
        status=_status_bucket(status_code),
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_cache_lookup(result: str) -> None:
    """R: result is one of hit / miss / expired."""
    _cache_lookups_total.labels(result=result).inc()


def set_cache_size(size: int) -> None:
    _cache_size.set(size)


def record_ingest_outcome(outcome: str) -> None:
    _ingest_total.labels(outcome=outcome).inc()


def record_warm_start_key(result: str) -> None:
    """R: result is one of loaded / mirror / failed."""
    _warm_start_keys_total.labels(result=result).inc()


def _normalize_endpoint(path: str) -> str:
    """R: Replace numeric path segments to prevent high cardinality."""
    return re.sub(r"/\d+", "/{id}", path)


def _status_bucket(code: int) -> str:
    """R: Bucket status code (2xx, 4xx, 5xx)."""
    if 200 <= code < 300:
        return "2xx"
    elif 400 <= code < 500:
        return "4xx"
    elif 500 <= code < 600:
        return "5xx"
    return "other"


def get_metrics_response() -> tuple[bytes, str]:
    """
    R: Generate Prometheus metrics response.

    Returns:
        Tuple of (body bytes, content type)
    """
    return generate_latest(_registry), CONTENT_TYPE_LATEST
