"""
Name: Ingest Order Use Case

Responsibilities:
  - Decide the fate of one raw stream record: decode -> dedupe -> persist -> cache
  - Tell the caller whether the record may be acknowledged

Collaborators:
  - application/codec: decode_order / encode_order
  - domain/repositories.OrderRepository: save_if_absent, cache_blob
  - domain/cache.OrderCache: has / set

Constraints:
  - The cache is written only after a successful persist
  - A persist failure is never acknowledged (the stream redelivers)
  - No internal retry

Notes:
  - Malformed and duplicate records are acknowledged: retrying them can
    never succeed and would only block the partition
  - A record the store rejects outright (RejectedOrderError) counts as
    malformed for the same reason
  - The blob mirror is best effort; its failure does not fail the record
"""

from ...domain.cache import OrderCache
from ...domain.entities import Order
from ...domain.repositories import OrderRepository
from ...exceptions import (
    MalformedOrderError,
    RejectedOrderError,
    TransientStoreError,
)
from ...context import order_uid_var
from ...logger import logger
from ...metrics import record_ingest_outcome
from ..codec import decode_order, encode_order
from .order_results import IngestOrderResult, IngestOutcome


class IngestOrderUseCase:
    """R: Ingest one raw order record."""

    def __init__(
        self,
        repository: OrderRepository,
        cache: OrderCache,
        *,
        cache_payloads: bool = True,
        mirror_blobs: bool = True,
    ):
        self.repository = repository
        self.cache = cache
        self.cache_payloads = cache_payloads
        self.mirror_blobs = mirror_blobs

    def execute(self, raw: bytes) -> IngestOrderResult:
        result = self._execute(raw)
        record_ingest_outcome(result.outcome.value)
        return result

    def _execute(self, raw: bytes) -> IngestOrderResult:
        try:
            order = decode_order(raw)
        except MalformedOrderError as exc:
            logger.warning(
                "Skipping malformed order record",
                extra={"error_id": exc.error_id, "reason": exc.message},
            )
            return IngestOrderResult(
                outcome=IngestOutcome.MALFORMED, acknowledge=True, error=exc
            )

        token = order_uid_var.set(order.order_uid)
        try:
            return self._persist(order)
        finally:
            order_uid_var.reset(token)

    def _persist(self, order: Order) -> IngestOrderResult:
        uid = order.order_uid

        if self.cache.has(uid):
            logger.info("Duplicate order skipped (already cached)")
            return IngestOrderResult(
                outcome=IngestOutcome.DUPLICATE, acknowledge=True, order_uid=uid
            )

        try:
            inserted = self.repository.save_if_absent(order)
        except RejectedOrderError as exc:
            logger.warning(
                "Skipping order rejected by the store",
                extra={"error_id": exc.error_id, "reason": exc.message},
            )
            return IngestOrderResult(
                outcome=IngestOutcome.MALFORMED,
                acknowledge=True,
                order_uid=uid,
                error=exc,
            )
        except TransientStoreError as exc:
            logger.error(
                "Failed to persist order; leaving record unacknowledged",
                extra={"error_id": exc.error_id, "error_code": exc.error_code},
            )
            return IngestOrderResult(
                outcome=IngestOutcome.FAILED,
                acknowledge=False,
                order_uid=uid,
                error=exc,
            )

        payload = encode_order(order)
        self.cache.set(uid, payload if self.cache_payloads else None)

        if self.mirror_blobs:
            try:
                self.repository.cache_blob(uid, payload)
            except (TransientStoreError, RejectedOrderError) as exc:
                logger.warning(
                    "Failed to mirror order blob",
                    extra={"error_id": exc.error_id},
                )

        logger.info(
            "Order ingested",
            extra={"inserted": inserted, "items": len(order.items)},
        )
        return IngestOrderResult(
            outcome=IngestOutcome.CACHED, acknowledge=True, order_uid=uid
        )
