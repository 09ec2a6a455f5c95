"""
Name: Order Generator Script

Responsibilities:
  - Build random but well-formed orders
  - Publish them to the orders topic keyed by order_uid (or just print them)
"""

from __future__ import annotations

import argparse
import random
import string
import sys
import time
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from confluent_kafka import Producer

from order_service.application.codec import encode_order
from order_service.domain.entities import Delivery, Item, Order, Payment

_CITIES = ["Moscow", "Kazan", "Novosibirsk", "Yekaterinburg", "Samara"]
_BRANDS = ["Vivienne Sabo", "Nike", "Xiaomi", "Lego", "Samsung"]
_BANKS = ["alpha", "sber", "tinkoff", "vtb"]


def _token(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_uppercase + string.digits, k=length))


def build_random_order(rng: random.Random, order_uid: Optional[str] = None) -> Order:
    uid = order_uid or uuid.UUID(int=rng.getrandbits(128), version=4).hex
    track_number = "WB" + _token(rng, 10)

    items: List[Item] = []
    for _ in range(rng.randint(1, 4)):
        price = rng.randint(100, 5000)
        sale = rng.choice([0, 10, 20, 30])
        items.append(
            Item(
                chrt_id=rng.randint(1_000_000, 9_999_999),
                track_number=track_number,
                price=price,
                rid=_token(rng, 20).lower(),
                name=rng.choice(["Mascaras", "Sneakers", "Phone", "Bricks", "TV"]),
                sale=sale,
                size=rng.choice(["0", "S", "M", "L"]),
                total_price=round(price * (100 - sale) / 100, 2),
                nm_id=rng.randint(1_000_000, 9_999_999),
                brand=rng.choice(_BRANDS),
                status=202,
            )
        )

    goods_total = round(sum(item.total_price for item in items), 2)
    delivery_cost = float(rng.choice([0, 500, 1500]))

    return Order(
        order_uid=uid,
        track_number=track_number,
        entry="WBIL",
        delivery=Delivery(
            name="Test Testov",
            phone="+7" + "".join(rng.choices(string.digits, k=10)),
            zip=str(rng.randint(100000, 999999)),
            city=rng.choice(_CITIES),
            address=f"Lenina {rng.randint(1, 200)}",
            region="Central",
            email=f"test{rng.randint(1, 9999)}@example.com",
        ),
        payment=Payment(
            transaction=uid,
            request_id="",
            currency="RUB",
            provider="wbpay",
            amount=int(goods_total + delivery_cost),
            payment_dt=int(time.time()),
            bank=rng.choice(_BANKS),
            delivery_cost=delivery_cost,
            goods_total=goods_total,
            custom_fee=0.0,
        ),
        items=items,
        locale=rng.choice(["en", "ru"]),
        customer_id="test",
        delivery_service="meest",
        shardkey=str(rng.randint(1, 9)),
        sm_id=rng.randint(1, 100),
        date_created=datetime.now(timezone.utc).replace(microsecond=0),
        oof_shard=str(rng.randint(1, 9)),
    )


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish random orders to Kafka.")
    parser.add_argument("--brokers", default="localhost:9092", help="Kafka bootstrap servers")
    parser.add_argument("--topic", default="orders", help="Topic to publish to")
    parser.add_argument("--count", type=int, default=10, help="Number of orders")
    parser.add_argument(
        "--interval-ms", type=int, default=1000, help="Pause between orders (ms)"
    )
    parser.add_argument(
        "--print-only", action="store_true", help="Print orders instead of sending them"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    if args.count < 1:
        raise SystemExit("--count must be >= 1")

    rng = random.Random(args.seed)
    producer = None if args.print_only else Producer({"bootstrap.servers": args.brokers})
    failures = 0

    def _on_delivery(err, msg) -> None:
        nonlocal failures
        if err is not None:
            failures += 1
            print(f"Delivery failed for {msg.key()!r}: {err}", file=sys.stderr)

    print(f"Generating {args.count} orders every {args.interval_ms}ms")
    for i in range(args.count):
        order = build_random_order(rng)
        payload = encode_order(order)

        if producer is None:
            print(f"Order {i + 1}: {payload.decode('utf-8')}")
        else:
            producer.produce(
                args.topic,
                key=order.order_uid.encode("utf-8"),
                value=payload,
                on_delivery=_on_delivery,
            )
            producer.poll(0)
            print(f"Order {i + 1} queued: {order.order_uid}")

        if i < args.count - 1 and args.interval_ms > 0:
            time.sleep(args.interval_ms / 1000)

    if producer is not None:
        producer.flush(10)
    print("Order generation completed")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
