"""
Name: Store Error Translation

Responsibilities:
  - Map psycopg / psycopg_pool failures onto the service's store errors
  - Separate permanent rejections (SQLSTATE class 22 data, 23 integrity)
    from failures that redelivery can cure

Collaborators:
  - infrastructure/repositories/postgres_order_repo.py
  - exceptions.TransientStoreError / StoreTimeoutError / RejectedOrderError
"""

from contextlib import contextmanager
from typing import Iterator

import psycopg
from psycopg import errors as pg_errors
from psycopg_pool import PoolTimeout

from ...exceptions import (
    OrderServiceError,
    RejectedOrderError,
    StoreTimeoutError,
    TransientStoreError,
)
from ...logger import logger


def translate_store_error(operation: str, exc: Exception) -> OrderServiceError:
    """
    R: Timeouts become StoreTimeoutError, data and integrity violations
    RejectedOrderError, everything else TransientStoreError.
    """
    if isinstance(exc, (pg_errors.QueryCanceled, PoolTimeout)):
        return StoreTimeoutError(
            f"Store operation '{operation}' timed out", original_error=exc
        )
    if isinstance(exc, (psycopg.DataError, psycopg.IntegrityError)):
        return RejectedOrderError(
            f"Store operation '{operation}' rejected the data", original_error=exc
        )
    return TransientStoreError(
        f"Store operation '{operation}' failed", original_error=exc
    )


@contextmanager
def store_operation(operation: str) -> Iterator[None]:
    """
    R: Wrap one gateway call; re-raise driver errors as store errors.

    Usage:
        with store_operation("get_order"):
            ...
    """
    try:
        yield
    except (psycopg.Error, PoolTimeout) as exc:
        error = translate_store_error(operation, exc)
        logger.error(
            "Store operation failed",
            extra={
                "operation": operation,
                "error_id": error.error_id,
                "error_code": error.error_code,
                "driver_error": type(exc).__name__,
            },
        )
        raise error from exc
