"""
Name: Typed Service Exceptions

Responsibilities:
  - Standardize internal errors that cross layer boundaries
  - Carry a stable error_code and an error_id for log correlation

Collaborators:
  - application/codec.py: raises MalformedOrderError
  - infrastructure/repositories: raise TransientStoreError / StoreTimeoutError
    / RejectedOrderError
  - exception_handlers.py: maps store errors to HTTP 500

Notes:
  - Client-side outcomes (bad request, not found) are result codes on the
    use case results, not exceptions (see application/use_cases/order_results.py)
"""

from uuid import uuid4


class OrderServiceError(Exception):
    """R: Base for internal errors of the order service."""

    error_code: str = "ORDER_SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class MalformedOrderError(OrderServiceError):
    """Inbound record cannot be decoded into an Order (never retried)."""

    error_code: str = "MALFORMED_ORDER"


class RejectedOrderError(OrderServiceError):
    """Store refused the order permanently (constraint or data violation)."""

    error_code: str = "ORDER_REJECTED"


class TransientStoreError(OrderServiceError):
    """Store gateway call failed; recoverable by redelivery or a later request."""

    error_code: str = "STORE_ERROR"


class StoreTimeoutError(TransientStoreError):
    """Store call exceeded its bounded timeout."""

    error_code: str = "STORE_TIMEOUT"
