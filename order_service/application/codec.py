"""
Name: Order Wire Codec

Responsibilities:
  - Decode raw stream payloads (JSON) into Order aggregates
  - Encode Order aggregates into the canonical JSON used by the cache,
    the blob mirror and the JSON HTTP response

Collaborators:
  - domain.entities.Order
  - pydantic.TypeAdapter: validation/serialization over plain dataclasses
  - exceptions.MalformedOrderError

Constraints:
  - Unknown fields are ignored; missing optional fields take defaults
  - An empty or blank order_uid is malformed
"""

from typing import Union

from pydantic import TypeAdapter, ValidationError

from ..domain.entities import Order
from ..exceptions import MalformedOrderError

_order_adapter = TypeAdapter(Order)


def decode_order(raw: Union[bytes, str]) -> Order:
    """
    R: Parse one raw payload into an Order.

    Raises:
        MalformedOrderError: payload is not valid JSON, does not match the
            order shape, or carries no usable order_uid
    """
    try:
        order = _order_adapter.validate_json(raw)
    except ValidationError as exc:
        raise MalformedOrderError(
            f"Invalid order payload: {exc.error_count()} validation error(s)",
            original_error=exc,
        ) from exc

    if not order.order_uid or not order.order_uid.strip():
        raise MalformedOrderError("Order payload has empty order_uid")
    return order


def encode_order(order: Order) -> bytes:
    return _order_adapter.dump_json(order)


def order_to_dict(order: Order) -> dict:
    """R: JSON-compatible dict (datetimes as ISO strings) for templates and responses."""
    return _order_adapter.dump_python(order, mode="json")
