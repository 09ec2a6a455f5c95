"""
Name: Request Context (ContextVars)

Responsibilities:
  - Store request-scoped data (request_id, method, path)
  - Store ingestion-scoped data (order_uid of the record being processed)
  - Enable structured logging with correlation, without parameter passing

Collaborators:
  - middleware.py: Sets HTTP context at request start
  - application/use_cases/ingest_order.py: Sets order_uid per record
  - logger.py: Reads context for log enrichment

Constraints:
  - Only primitive types (str) for safety
  - Default empty string (never None) for JSON serialization

Notes:
  - contextvars are isolated per thread and per asyncio task
"""

from contextvars import ContextVar

# R: Request identifier (UUID) - set by middleware
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# R: HTTP method - set by middleware
http_method_var: ContextVar[str] = ContextVar("http_method", default="")

# R: Request path - set by middleware
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

# R: Order being ingested - set by IngestOrderUseCase
order_uid_var: ContextVar[str] = ContextVar("order_uid", default="")


def get_context_dict() -> dict:
    """
    R: Get current context as dict for log enrichment.

    Returns:
        Dict with non-empty context values only
    """
    ctx = {}

    if val := request_id_var.get():
        ctx["request_id"] = val
    if val := http_method_var.get():
        ctx["method"] = val
    if val := http_path_var.get():
        ctx["path"] = val
    if val := order_uid_var.get():
        ctx["order_uid"] = val

    return ctx


def clear_context() -> None:
    """R: Clear all context vars (called after each request / record)."""
    request_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
    order_uid_var.set("")
