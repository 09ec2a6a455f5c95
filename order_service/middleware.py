"""
Name: HTTP Middleware

Responsibilities:
  - Reuse or mint the request id and echo it as X-Request-Id
  - Seed the logging context (request id, method, path, looked-up order id)
  - Log one access line per request, including where the order came from
  - Record request metrics (latency, count)

Collaborators:
  - context.py: ContextVars for request-scoped data
  - metrics.py: Prometheus counters and histograms
  - logger.py: Structured logging

Constraints:
  - Must be first middleware
  - Context is cleared after every request
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .context import (
    clear_context,
    http_method_var,
    http_path_var,
    order_uid_var,
    request_id_var,
)
from .logger import logger
from .metrics import record_request_metrics

REQUEST_ID_HEADER = "X-Request-Id"
ORDER_SOURCE_HEADER = "X-Order-Source"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """R: Correlates logs and metrics for each HTTP request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        request_id_var.set(request_id)
        http_method_var.set(request.method)
        http_path_var.set(request.url.path)
        order_uid = request.query_params.get("id", "").strip()
        if order_uid:
            order_uid_var.set(order_uid)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                "request failed",
                extra={"latency_ms": _elapsed_ms(started), "error": str(exc)},
            )
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            source = response.headers.get(ORDER_SOURCE_HEADER)
            logger.info(
                "request completed",
                extra={
                    "status_code": response.status_code,
                    "latency_ms": _elapsed_ms(started),
                    **({"order_source": source} if source else {}),
                },
            )
            record_request_metrics(
                endpoint=request.url.path,
                method=request.method,
                status_code=response.status_code,
                latency_seconds=time.perf_counter() - started,
            )
            return response
        finally:
            clear_context()
