"""
Name: PostgreSQL Order Repository Implementation

Responsibilities:
  - Implement OrderRepository for PostgreSQL
  - Persist the order aggregate (orders, delivery, payment, items) atomically
  - Maintain the serialized-order mirror table (order_cache)

Collaborators:
  - domain.repositories.OrderRepository: Interface implementation
  - domain.entities: Order, Delivery, Payment, Item
  - infrastructure.db.pool: Connection pool
  - infrastructure.db.errors: driver error translation

Constraints:
  - Every call is bounded: pool checkout timeout + per-connection statement_timeout
  - Errors surface only as TransientStoreError / StoreTimeoutError

Notes:
  - The order row is inserted with ON CONFLICT (order_uid) DO NOTHING; when
    nothing is inserted the children are left untouched and False is returned
"""

from typing import List, Optional

from psycopg_pool import ConnectionPool

from ...domain.entities import Delivery, Item, Order, Payment
from ...logger import logger
from ..db.errors import store_operation


class PostgresOrderRepository:
    """
    R: PostgreSQL implementation of OrderRepository.

    Uses connection pool for efficient connection reuse.
    All write operations use transactions for atomicity.
    """

    def __init__(
        self,
        pool: Optional[ConnectionPool] = None,
        *,
        timeout_seconds: float = 5.0,
    ):
        """
        R: Initialize repository with connection pool.

        Args:
            pool: Connection pool (if None, uses global pool)
            timeout_seconds: Max wait for a pooled connection
        """
        self._pool = pool
        self._timeout_seconds = timeout_seconds

    def _get_pool(self) -> ConnectionPool:
        """R: Get pool, falling back to global if not injected."""
        if self._pool is not None:
            return self._pool

        from ..db.pool import get_pool

        return get_pool()

    def _connection(self):
        return self._get_pool().connection(timeout=self._timeout_seconds)

    def save_if_absent(self, order: Order) -> bool:
        with store_operation("save_if_absent"):
            with self._connection() as conn:
                # R: Order + children commit together or not at all
                with conn.transaction():
                    row = conn.execute(
                        """
                        INSERT INTO orders (
                            order_uid, track_number, entry, locale, internal_signature,
                            customer_id, delivery_service, shardkey, sm_id,
                            date_created, oof_shard
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        ON CONFLICT (order_uid) DO NOTHING
                        RETURNING order_uid
                        """,
                        (
                            order.order_uid,
                            order.track_number,
                            order.entry,
                            order.locale,
                            order.internal_signature,
                            order.customer_id,
                            order.delivery_service,
                            order.shardkey,
                            order.sm_id,
                            order.date_created,
                            order.oof_shard,
                        ),
                    ).fetchone()

                    if row is None:
                        logger.info(
                            "PostgresOrderRepository: order already persisted",
                            extra={"order_uid": order.order_uid},
                        )
                        return False

                    delivery = order.delivery
                    conn.execute(
                        """
                        INSERT INTO delivery (
                            order_uid, name, phone, zip, city, address, region, email
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            order.order_uid,
                            delivery.name,
                            delivery.phone,
                            delivery.zip,
                            delivery.city,
                            delivery.address,
                            delivery.region,
                            delivery.email,
                        ),
                    )

                    payment = order.payment
                    conn.execute(
                        """
                        INSERT INTO payment (
                            order_uid, transaction_id, request_id, currency, provider,
                            amount, payment_dt, bank, delivery_cost, goods_total,
                            custom_fee
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            order.order_uid,
                            payment.transaction,
                            payment.request_id,
                            payment.currency,
                            payment.provider,
                            payment.amount,
                            payment.payment_dt,
                            payment.bank,
                            payment.delivery_cost,
                            payment.goods_total,
                            payment.custom_fee,
                        ),
                    )

                    if order.items:
                        with conn.cursor() as cur:
                            cur.executemany(
                                """
                                INSERT INTO items (
                                    order_uid, position, chrt_id, track_number, price,
                                    rid, name, sale, size, total_price, nm_id, brand,
                                    status
                                ) VALUES (
                                    %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
                                )
                                """,
                                [
                                    (
                                        order.order_uid,
                                        position,
                                        item.chrt_id,
                                        item.track_number,
                                        item.price,
                                        item.rid,
                                        item.name,
                                        item.sale,
                                        item.size,
                                        item.total_price,
                                        item.nm_id,
                                        item.brand,
                                        item.status,
                                    )
                                    for position, item in enumerate(order.items)
                                ],
                            )

        logger.info(
            "PostgresOrderRepository: order saved",
            extra={"order_uid": order.order_uid, "items": len(order.items)},
        )
        return True

    def get_order(self, order_uid: str) -> Optional[Order]:
        with store_operation("get_order"):
            with self._connection() as conn:
                row = conn.execute(
                    """
                    SELECT order_uid, track_number, entry, locale, internal_signature,
                           customer_id, delivery_service, shardkey, sm_id,
                           date_created, oof_shard
                    FROM orders
                    WHERE order_uid = %s
                    """,
                    (order_uid,),
                ).fetchone()
                if row is None:
                    return None

                delivery_row = conn.execute(
                    """
                    SELECT name, phone, zip, city, address, region, email
                    FROM delivery
                    WHERE order_uid = %s
                    """,
                    (order_uid,),
                ).fetchone()

                payment_row = conn.execute(
                    """
                    SELECT transaction_id, request_id, currency, provider, amount,
                           payment_dt, bank, delivery_cost, goods_total, custom_fee
                    FROM payment
                    WHERE order_uid = %s
                    """,
                    (order_uid,),
                ).fetchone()

                item_rows = conn.execute(
                    """
                    SELECT chrt_id, track_number, price, rid, name, sale, size,
                           total_price, nm_id, brand, status
                    FROM items
                    WHERE order_uid = %s
                    ORDER BY position
                    """,
                    (order_uid,),
                ).fetchall()

        return Order(
            order_uid=row[0],
            track_number=row[1],
            entry=row[2],
            locale=row[3],
            internal_signature=row[4],
            customer_id=row[5],
            delivery_service=row[6],
            shardkey=row[7],
            sm_id=row[8],
            date_created=row[9],
            oof_shard=row[10],
            delivery=_row_to_delivery(delivery_row),
            payment=_row_to_payment(payment_row),
            items=[_row_to_item(r) for r in item_rows],
        )

    def list_order_uids(self) -> List[str]:
        with store_operation("list_order_uids"):
            with self._connection() as conn:
                rows = conn.execute(
                    "SELECT order_uid FROM orders ORDER BY order_uid"
                ).fetchall()
        return [r[0] for r in rows]

    def cache_blob(self, order_uid: str, data: bytes) -> None:
        with store_operation("cache_blob"):
            with self._connection() as conn:
                conn.execute(
                    """
                    INSERT INTO order_cache (order_uid, data, created_at)
                    VALUES (%s, %s, NOW())
                    ON CONFLICT (order_uid) DO UPDATE
                    SET data = EXCLUDED.data,
                        created_at = EXCLUDED.created_at
                    """,
                    (order_uid, data),
                )

    def get_blob(self, order_uid: str) -> Optional[bytes]:
        with store_operation("get_blob"):
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT data FROM order_cache WHERE order_uid = %s",
                    (order_uid,),
                ).fetchone()
        if row is None:
            return None
        return bytes(row[0])

    def ping(self) -> bool:
        with store_operation("ping"):
            with self._connection() as conn:
                conn.execute("SELECT 1").fetchone()
        return True


def _row_to_delivery(row) -> Delivery:
    if row is None:
        return Delivery()
    return Delivery(
        name=row[0],
        phone=row[1],
        zip=row[2],
        city=row[3],
        address=row[4],
        region=row[5],
        email=row[6],
    )


def _row_to_payment(row) -> Payment:
    if row is None:
        return Payment()
    return Payment(
        transaction=row[0],
        request_id=row[1],
        currency=row[2],
        provider=row[3],
        amount=row[4],
        payment_dt=row[5],
        bank=row[6],
        delivery_cost=float(row[7]),
        goods_total=float(row[8]),
        custom_fee=float(row[9]),
    )


def _row_to_item(row) -> Item:
    return Item(
        chrt_id=row[0],
        track_number=row[1],
        price=float(row[2]),
        rid=row[3],
        name=row[4],
        sale=row[5],
        size=row[6],
        total_price=float(row[7]),
        nm_id=row[8],
        brand=row[9],
        status=row[10],
    )
