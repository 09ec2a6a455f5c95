"""
Name: FastAPI Exception Handlers

Responsibilities:
  - Convert store exceptions into RFC 7807 HTTP responses
  - Centralized logging of errors with correlation IDs

Collaborators:
  - main.py: Registers these handlers
  - exceptions.py: TransientStoreError, StoreTimeoutError
  - error_responses.py: problem_response, store_failure

Constraints:
  - Store failures (including timeouts) are HTTP 500
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from .error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    problem_response,
    store_failure,
)
from .exceptions import StoreTimeoutError, TransientStoreError
from .logger import logger


async def store_error_handler(
    request: Request, exc: TransientStoreError
) -> JSONResponse:
    logger.error(
        "Store error",
        extra={
            "error_id": exc.error_id,
            "error_code": exc.error_code,
            "error_message": exc.message,
        },
    )
    app_exc = store_failure(
        exc.error_id, timed_out=isinstance(exc, StoreTimeoutError)
    )
    return await app_exception_handler(request, app_exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return problem_response(
        request, ErrorCode.INTERNAL_ERROR, "An unexpected error occurred"
    )


def register_exception_handlers(app) -> None:
    """R: Register store, application and fallback handlers on the app."""
    app.add_exception_handler(TransientStoreError, store_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
