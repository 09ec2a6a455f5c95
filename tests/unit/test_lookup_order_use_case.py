"""Unit tests for LookupOrderUseCase (cache-first read-through)."""

from unittest.mock import Mock

import pytest

from conftest import make_order
from order_service.application.codec import encode_order
from order_service.application.use_cases import (
    LookupOrderInput,
    LookupOrderUseCase,
    OrderErrorCode,
    OrderSource,
)
from order_service.exceptions import StoreTimeoutError, TransientStoreError
from order_service.infrastructure.repositories import InMemoryOrderRepository

pytestmark = pytest.mark.unit


class TestLookupOrderUseCase:
    @pytest.mark.parametrize("uid", ["", "   "])
    def test_blank_id_is_bad_request_without_calls(self, uid):
        repo = Mock()
        cache = Mock()

        result = LookupOrderUseCase(repo, cache).execute(LookupOrderInput(uid))

        assert result.error.code == OrderErrorCode.BAD_REQUEST
        repo.assert_not_called()
        cache.get.assert_not_called()
        repo.get_order.assert_not_called()

    def test_cache_hit_does_not_touch_store(self, cache):
        order = make_order("A1")
        cache.set("A1", encode_order(order))
        repo = InMemoryOrderRepository()

        result = LookupOrderUseCase(repo, cache).execute(LookupOrderInput("A1"))

        assert result.error is None
        assert result.source == OrderSource.CACHE
        assert result.order == order
        assert repo.calls["get_order"] == 0

    def test_store_hit_populates_cache_then_serves_from_cache(self, cache):
        repo = InMemoryOrderRepository([make_order("B2")])
        use_case = LookupOrderUseCase(repo, cache)

        first = use_case.execute(LookupOrderInput("B2"))
        second = use_case.execute(LookupOrderInput("B2"))

        assert first.source == OrderSource.STORE
        assert second.source == OrderSource.CACHE
        assert second.order == first.order
        assert repo.calls["get_order"] == 1

    def test_not_found_is_not_cached(self, cache):
        repo = InMemoryOrderRepository()
        use_case = LookupOrderUseCase(repo, cache)

        result = use_case.execute(LookupOrderInput("ZZZ"))
        use_case.execute(LookupOrderInput("ZZZ"))

        assert result.error.code == OrderErrorCode.NOT_FOUND
        assert cache.has("ZZZ") is False
        assert repo.calls["get_order"] == 2

    def test_corrupt_cache_entry_is_replaced_from_store(self, cache):
        cache.set("A1", b"{corrupt")
        repo = InMemoryOrderRepository([make_order("A1")])

        result = LookupOrderUseCase(repo, cache).execute(LookupOrderInput("A1"))

        assert result.source == OrderSource.STORE
        assert result.order.order_uid == "A1"
        value, found = cache.get("A1")
        assert found and value != b"{corrupt"

    def test_corrupt_cache_entry_and_missing_in_store(self, cache):
        cache.set("A1", b"{corrupt")
        repo = InMemoryOrderRepository()

        result = LookupOrderUseCase(repo, cache).execute(LookupOrderInput("A1"))

        assert result.error.code == OrderErrorCode.NOT_FOUND
        assert cache.has("A1") is False

    def test_expired_entry_falls_back_to_store(self, cache, clock):
        order = make_order("A1")
        cache.set("A1", encode_order(order))
        clock.advance(120)
        repo = InMemoryOrderRepository([order])

        result = LookupOrderUseCase(repo, cache).execute(LookupOrderInput("A1"))

        assert result.source == OrderSource.STORE
        assert repo.calls["get_order"] == 1

    def test_presence_mode_summary_served_from_cache(self, cache):
        cache.set("A1")
        repo = InMemoryOrderRepository([make_order("A1")])
        use_case = LookupOrderUseCase(repo, cache, cache_payloads=False)

        result = use_case.execute(LookupOrderInput("A1", include_details=False))

        assert result.source == OrderSource.CACHE
        assert result.order is None
        assert repo.calls["get_order"] == 0

    def test_presence_mode_details_fetched_from_store(self, cache):
        cache.set("A1")
        repo = InMemoryOrderRepository([make_order("A1")])
        use_case = LookupOrderUseCase(repo, cache, cache_payloads=False)

        result = use_case.execute(LookupOrderInput("A1"))

        assert result.source == OrderSource.STORE
        assert result.order.order_uid == "A1"
        # R: Cache stays presence-only
        assert cache.get("A1") == (None, True)

    @pytest.mark.parametrize("error_cls", [TransientStoreError, StoreTimeoutError])
    def test_store_errors_propagate(self, cache, error_cls):
        repo = Mock()
        repo.get_order.side_effect = error_cls("boom")

        with pytest.raises(error_cls):
            LookupOrderUseCase(repo, cache).execute(LookupOrderInput("A1"))
        assert cache.has("A1") is False
