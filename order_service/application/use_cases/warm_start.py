"""
Name: Warm-Start Loader

Responsibilities:
  - Rebuild the in-process cache from the durable store before serving
  - Prefer the serialized blob mirror; fall back to the full aggregate

Collaborators:
  - domain/repositories.OrderRepository: list_order_uids, get_blob, get_order, cache_blob
  - domain/cache.OrderCache: set
  - concurrent.futures.ThreadPoolExecutor: bounded parallel fetches

Constraints:
  - Must fully drain before ingestion starts and HTTP traffic is accepted
  - A per-key failure never aborts the load
  - A listing failure leaves the cache empty and startup continues

Notes:
  - Presence-only mode needs no per-key fetch: listing the keys is enough
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional

from ...domain.cache import OrderCache
from ...domain.repositories import OrderRepository
from ...exceptions import (
    MalformedOrderError,
    RejectedOrderError,
    TransientStoreError,
)
from ...logger import logger
from ...metrics import record_warm_start_key
from ..codec import decode_order, encode_order
from .order_results import WarmStartReport

_LOADED = "loaded"
_MIRROR = "mirror"
_FAILED = "failed"


class WarmStartLoader:
    """R: Populate the cache from every persisted order."""

    def __init__(
        self,
        repository: OrderRepository,
        cache: OrderCache,
        *,
        max_workers: int = 5,
        cache_payloads: bool = True,
        use_blob_mirror: bool = True,
    ):
        self.repository = repository
        self.cache = cache
        self.max_workers = max(1, max_workers)
        self.cache_payloads = cache_payloads
        self.use_blob_mirror = use_blob_mirror

    def load(self) -> WarmStartReport:
        try:
            uids = self.repository.list_order_uids()
        except TransientStoreError as exc:
            logger.error(
                "Warm start could not list orders; starting with empty cache",
                extra={"error_id": exc.error_id, "error_code": exc.error_code},
            )
            return WarmStartReport()

        report = WarmStartReport(total=len(uids))
        if not uids:
            logger.info("Warm start: no persisted orders")
            return report

        if not self.cache_payloads:
            for uid in uids:
                self.cache.set(uid)
                record_warm_start_key(_LOADED)
            report.loaded = len(uids)
            logger.info("Warm start complete", extra={"loaded": report.loaded})
            return report

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="warm-start"
        ) as pool:
            futures = {pool.submit(self._load_one, uid): uid for uid in uids}
            for future in as_completed(futures):
                uid = futures[future]
                try:
                    result = future.result()
                except Exception:
                    logger.exception(
                        "Warm start failed for order", extra={"order_uid": uid}
                    )
                    result = _FAILED

                record_warm_start_key(result)
                if result == _FAILED:
                    report.failed += 1
                else:
                    report.loaded += 1
                    if result == _MIRROR:
                        report.from_mirror += 1

        logger.info(
            "Warm start complete",
            extra={
                "total": report.total,
                "loaded": report.loaded,
                "failed": report.failed,
                "from_mirror": report.from_mirror,
            },
        )
        return report

    def _load_one(self, uid: str) -> str:
        blob = self._mirror_blob(uid)
        if blob is not None:
            self.cache.set(uid, blob)
            return _MIRROR

        order = self.repository.get_order(uid)
        if order is None:
            # R: Listed but gone by now
            logger.warning("Warm start: order vanished", extra={"order_uid": uid})
            return _FAILED

        payload = encode_order(order)
        self.cache.set(uid, payload)

        if self.use_blob_mirror:
            try:
                self.repository.cache_blob(uid, payload)
            except (TransientStoreError, RejectedOrderError) as exc:
                logger.warning(
                    "Warm start could not refresh blob mirror",
                    extra={"order_uid": uid, "error_id": exc.error_id},
                )
        return _LOADED

    def _mirror_blob(self, uid: str) -> Optional[bytes]:
        if not self.use_blob_mirror:
            return None
        try:
            blob = self.repository.get_blob(uid)
        except TransientStoreError as exc:
            logger.warning(
                "Warm start could not read blob mirror",
                extra={"order_uid": uid, "error_id": exc.error_id},
            )
            return None
        if blob is None:
            return None
        try:
            decode_order(blob)
        except MalformedOrderError:
            logger.warning("Warm start: invalid mirrored blob", extra={"order_uid": uid})
            return None
        return blob
