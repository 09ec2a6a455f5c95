"""
Name: Lookup Order Use Case

Responsibilities:
  - Resolve an order by identifier: cache first, durable store on miss
  - Populate the cache from store hits (read-through)

Collaborators:
  - domain/cache.OrderCache: get / set / delete
  - domain/repositories.OrderRepository: get_order
  - application/codec: decode_order / encode_order

Constraints:
  - Blank identifiers are rejected before any cache or store call
  - Not-found results are never cached
  - Store errors propagate (TransientStoreError / StoreTimeoutError)

Notes:
  - In presence-only mode the cache can confirm existence but not serve
    details; detail requests go to the store and the cache stays presence-only
"""

from dataclasses import dataclass

from ...domain.cache import OrderCache
from ...domain.repositories import OrderRepository
from ...exceptions import MalformedOrderError
from ...logger import logger
from ..codec import decode_order, encode_order
from .order_results import (
    LookupOrderResult,
    OrderError,
    OrderErrorCode,
    OrderSource,
)


@dataclass
class LookupOrderInput:
    order_uid: str
    include_details: bool = True


class LookupOrderUseCase:
    """R: Fetch an order by order_uid."""

    def __init__(
        self,
        repository: OrderRepository,
        cache: OrderCache,
        *,
        cache_payloads: bool = True,
    ):
        self.repository = repository
        self.cache = cache
        self.cache_payloads = cache_payloads

    def execute(self, input_data: LookupOrderInput) -> LookupOrderResult:
        uid = (input_data.order_uid or "").strip()
        if not uid:
            return LookupOrderResult(
                error=OrderError(
                    code=OrderErrorCode.BAD_REQUEST,
                    message="Order id is required.",
                )
            )

        value, found = self.cache.get(uid)
        if found:
            if value is not None:
                try:
                    order = decode_order(value)
                except MalformedOrderError:
                    # R: Corrupt entry is dropped and rebuilt from the store
                    logger.warning(
                        "Discarding undecodable cache entry",
                        extra={"order_uid": uid},
                    )
                    self.cache.delete(uid)
                else:
                    return LookupOrderResult(
                        order_uid=uid, order=order, source=OrderSource.CACHE
                    )
            elif not input_data.include_details:
                return LookupOrderResult(order_uid=uid, source=OrderSource.CACHE)

        order = self.repository.get_order(uid)
        if order is None:
            return LookupOrderResult(
                order_uid=uid,
                error=OrderError(
                    code=OrderErrorCode.NOT_FOUND,
                    message="Order not found.",
                    resource="Order",
                ),
            )

        self.cache.set(uid, encode_order(order) if self.cache_payloads else None)
        return LookupOrderResult(order_uid=uid, order=order, source=OrderSource.STORE)
