"""
Name: Order HTML Rendering

Responsibilities:
  - Render an order as a standalone HTML page for GET /order?format=html

Collaborators:
  - jinja2.Environment: template compilation (autoescape on)
  - application/codec.order_to_dict: JSON-compatible view of the order

Notes:
  - Template lives in-module; the page has no external assets
"""

from jinja2 import Environment, Template, select_autoescape

from .application.codec import order_to_dict
from .domain.entities import Order

_ORDER_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Order {{ order.order_uid }}</title>
  <style>
    body { font-family: sans-serif; margin: 2rem; }
    table { border-collapse: collapse; margin-bottom: 1.5rem; }
    th, td { border: 1px solid #ccc; padding: 4px 8px; text-align: left; }
    th { background: #f4f4f4; }
  </style>
</head>
<body>
  <h1>Order {{ order.order_uid }}</h1>
  <p>Source: {{ source }}</p>

  <h2>Order</h2>
  <table>
  {% for key in order_fields %}
    <tr><th>{{ key }}</th><td>{{ order[key] if order[key] is not none else "" }}</td></tr>
  {% endfor %}
  </table>

  <h2>Delivery</h2>
  <table>
  {% for key, value in order.delivery.items() %}
    <tr><th>{{ key }}</th><td>{{ value }}</td></tr>
  {% endfor %}
  </table>

  <h2>Payment</h2>
  <table>
  {% for key, value in order.payment.items() %}
    <tr><th>{{ key }}</th><td>{{ value }}</td></tr>
  {% endfor %}
  </table>

  <h2>Items ({{ order["items"]|length }})</h2>
  <table>
    <tr>
    {% for key in item_fields %}<th>{{ key }}</th>{% endfor %}
    </tr>
  {% for item in order["items"] %}
    <tr>
    {% for key in item_fields %}<td>{{ item[key] }}</td>{% endfor %}
    </tr>
  {% endfor %}
  </table>
</body>
</html>
"""

_ORDER_FIELDS = (
    "order_uid",
    "track_number",
    "entry",
    "locale",
    "internal_signature",
    "customer_id",
    "delivery_service",
    "shardkey",
    "sm_id",
    "date_created",
    "oof_shard",
)

_ITEM_FIELDS = (
    "chrt_id",
    "track_number",
    "price",
    "rid",
    "name",
    "sale",
    "size",
    "total_price",
    "nm_id",
    "brand",
    "status",
)


class OrderPageRenderer:
    """Renders the order detail page."""

    def __init__(self) -> None:
        self._env = Environment(autoescape=select_autoescape(default=True))
        self._template: Template = self._env.from_string(_ORDER_TEMPLATE)

    def render(self, order: Order, source: str) -> str:
        return self._template.render(
            order=order_to_dict(order),
            source=source,
            order_fields=_ORDER_FIELDS,
            item_fields=_ITEM_FIELDS,
        )
