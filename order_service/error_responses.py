"""
Name: Problem Details Responses

Responsibilities:
  - Define the API error codes and the RFC 7807 body
  - Translate lookup OrderError results into HTTP exceptions
  - Build application/problem+json responses for every error path

Collaborators:
  - routes.py: raises from_order_error / bad_request
  - exception_handlers.py: store and unhandled failures
  - application/use_cases/order_results.py: OrderErrorCode

Constraints:
  - Store failures and timeouts share status 500 and differ by code
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .application.use_cases.order_results import OrderError, OrderErrorCode

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"
_PROBLEM_TYPE_BASE = "https://orders.local/errors/"


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    STORE_ERROR = "STORE_ERROR"
    STORE_TIMEOUT = "STORE_TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_STATUS_BY_CODE = {
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.STORE_ERROR: 500,
    ErrorCode.STORE_TIMEOUT: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}

_CODE_BY_ORDER_ERROR = {
    OrderErrorCode.BAD_REQUEST: ErrorCode.BAD_REQUEST,
    OrderErrorCode.NOT_FOUND: ErrorCode.NOT_FOUND,
}


class ErrorDetail(BaseModel):
    """RFC 7807 Problem Details body."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


OPENAPI_ERROR_RESPONSES = {
    str(status): {
        "description": f"{description} (RFC 7807 Problem Details)",
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"},
            }
        },
    }
    for status, description in (
        (400, "Missing or invalid order id"),
        (404, "Order not found"),
        (500, "Order store failure"),
    )
}


class AppHTTPException(HTTPException):
    """HTTP exception carrying an ErrorCode; status derives from the code."""

    def __init__(
        self,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=_STATUS_BY_CODE[code], detail=detail)
        self.code = code
        self.errors = errors


def bad_request(detail: str) -> AppHTTPException:
    return AppHTTPException(ErrorCode.BAD_REQUEST, detail)


def not_found(resource: str, identifier: str) -> AppHTTPException:
    return AppHTTPException(ErrorCode.NOT_FOUND, f"{resource} '{identifier}' not found")


def from_order_error(error: OrderError, order_uid: str | None) -> AppHTTPException:
    """R: Map a lookup result error onto its HTTP counterpart."""
    code = _CODE_BY_ORDER_ERROR[error.code]
    if code == ErrorCode.NOT_FOUND:
        return not_found(error.resource or "Order", order_uid or "")
    return AppHTTPException(code, error.message)


def store_failure(error_id: str, *, timed_out: bool) -> AppHTTPException:
    if timed_out:
        return AppHTTPException(
            ErrorCode.STORE_TIMEOUT,
            "Order store timed out",
            errors=[{"error_id": error_id}],
        )
    return AppHTTPException(
        ErrorCode.STORE_ERROR,
        "Order store is unavailable",
        errors=[{"error_id": error_id}],
    )


def problem_response(
    request: Request,
    code: ErrorCode,
    detail: str,
    *,
    errors: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    status = _STATUS_BY_CODE[code]
    body = ErrorDetail(
        type=_PROBLEM_TYPE_BASE + code.value.lower(),
        title=code.value.replace("_", " ").title(),
        status=status,
        detail=detail,
        code=code,
        instance=str(request.url),
        errors=errors,
    )
    return JSONResponse(
        status_code=status,
        content=body.model_dump(exclude_none=True),
        headers=headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    return problem_response(
        request,
        exc.code,
        exc.detail,
        errors=exc.errors,
        headers=getattr(exc, "headers", None),
    )
