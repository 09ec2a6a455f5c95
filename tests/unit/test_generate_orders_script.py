"""Smoke tests for scripts/generate_orders.py (no Kafka: --print-only)."""

import importlib.util
import random
from pathlib import Path

import pytest

from order_service.application.codec import decode_order, encode_order

pytestmark = pytest.mark.unit

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "generate_orders.py"


@pytest.fixture(scope="module")
def script():
    module_spec = importlib.util.spec_from_file_location("generate_orders", SCRIPT_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def test_random_order_is_valid(script):
    order = script.build_random_order(random.Random(7))

    assert order.order_uid
    assert order.items
    assert order.payment.goods_total == round(
        sum(item.total_price for item in order.items), 2
    )
    assert decode_order(encode_order(order)) == order


def test_seeded_generation_is_deterministic(script):
    first = script.build_random_order(random.Random(1))
    second = script.build_random_order(random.Random(1))
    assert first.order_uid == second.order_uid


def test_print_only(script, capsys):
    exit_code = script.main(["--count", "2", "--interval-ms", "0", "--print-only"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert out.count("Order 1:") == 1
    assert "Order 2:" in out
