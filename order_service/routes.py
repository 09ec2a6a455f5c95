"""
Name: Order Lookup Routes

Responsibilities:
  - GET /order: resolve an order through LookupOrderUseCase
  - Render HTML (default) or JSON, full or summary view
  - Map use case error codes to RFC 7807 responses

Collaborators:
  - container.py: use case and renderer dependencies
  - error_responses.py: bad_request / from_order_error
  - exception_handlers.py: store errors -> 500 (raised through)

Constraints:
  - Sync handlers (run on the threadpool; store calls block)
  - X-Order-Source tells whether the answer came from cache or store
  - view=summary is a JSON presence answer whatever the format
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, JSONResponse, Response

from .application.codec import order_to_dict
from .application.use_cases import (
    LookupOrderInput,
    LookupOrderUseCase,
)
from .container import get_lookup_order_use_case, get_order_renderer
from .error_responses import OPENAPI_ERROR_RESPONSES, bad_request, from_order_error
from .rendering import OrderPageRenderer

router = APIRouter()

_FORMATS = {"html", "json"}
_VIEWS = {"full", "summary"}


@router.get("/order", tags=["orders"], responses=OPENAPI_ERROR_RESPONSES)
def get_order(
    order_id: Optional[str] = Query(default=None, alias="id"),
    format: str = Query(default="html"),
    view: str = Query(default="full"),
    use_case: LookupOrderUseCase = Depends(get_lookup_order_use_case),
    renderer: OrderPageRenderer = Depends(get_order_renderer),
) -> Response:
    fmt = format.strip().lower()
    if fmt not in _FORMATS:
        raise bad_request("format must be 'html' or 'json'")
    view_mode = view.strip().lower()
    if view_mode not in _VIEWS:
        raise bad_request("view must be 'full' or 'summary'")

    result = use_case.execute(
        LookupOrderInput(
            order_uid=order_id or "",
            include_details=view_mode == "full",
        )
    )

    if result.error:
        raise from_order_error(result.error, result.order_uid)

    headers = {"X-Order-Source": result.source.value}

    if view_mode == "summary":
        return JSONResponse(
            {"order_uid": result.order_uid, "found": True}, headers=headers
        )

    if fmt == "json":
        return JSONResponse(order_to_dict(result.order), headers=headers)

    return HTMLResponse(
        renderer.render(result.order, source=result.source.value), headers=headers
    )
