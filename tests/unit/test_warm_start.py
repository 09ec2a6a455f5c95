"""Unit tests for WarmStartLoader."""

import threading
import time
from unittest.mock import Mock

import pytest

from conftest import make_order
from order_service.application.codec import decode_order, encode_order
from order_service.application.use_cases import WarmStartLoader
from order_service.exceptions import TransientStoreError
from order_service.infrastructure.repositories import InMemoryOrderRepository

pytestmark = pytest.mark.unit


class _ConcurrencyTrackingRepository(InMemoryOrderRepository):
    """Records the peak number of per-key fetches in flight."""

    def __init__(self, orders):
        super().__init__(orders)
        self._gauge = threading.Lock()
        self.in_flight = 0
        self.peak = 0

    def _tracked(self, fetch, order_uid):
        with self._gauge:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        try:
            time.sleep(0.01)
            return fetch(order_uid)
        finally:
            with self._gauge:
                self.in_flight -= 1

    def get_order(self, order_uid):
        return self._tracked(super().get_order, order_uid)

    def get_blob(self, order_uid):
        return self._tracked(super().get_blob, order_uid)


class TestWarmStartLoader:
    def test_loads_every_order(self, cache):
        repo = InMemoryOrderRepository([make_order(f"O{i}") for i in range(12)])

        report = WarmStartLoader(repo, cache, max_workers=3).load()

        assert report.total == 12
        assert report.loaded == 12
        assert report.failed == 0
        assert set(cache.dump()) == {f"O{i}" for i in range(12)}
        assert decode_order(cache.get("O3")[0]).order_uid == "O3"

    def test_fetches_never_exceed_worker_limit(self, cache):
        uids = [f"O{i:02d}" for i in range(20)]
        repo = _ConcurrencyTrackingRepository([make_order(uid) for uid in uids])

        report = WarmStartLoader(repo, cache, max_workers=3).load()

        assert 1 < repo.peak <= 3
        assert report.loaded == 20
        assert set(cache.dump()) == set(uids)

    def test_prefers_valid_mirror_blob(self, cache):
        order = make_order("A1")
        repo = InMemoryOrderRepository([order])
        repo.put_blob("A1", encode_order(order))

        report = WarmStartLoader(repo, cache).load()

        assert report.from_mirror == 1
        assert repo.calls["get_order"] == 0
        assert cache.get("A1")[0] == encode_order(order)

    def test_invalid_mirror_blob_falls_back_to_store(self, cache):
        repo = InMemoryOrderRepository([make_order("A1")])
        repo.put_blob("A1", b"not json")

        report = WarmStartLoader(repo, cache).load()

        assert report.loaded == 1
        assert report.from_mirror == 0
        assert repo.calls["get_order"] == 1
        # R: Mirror refreshed with a valid blob
        assert decode_order(repo.get_blob("A1")).order_uid == "A1"

    def test_mirror_disabled_reads_store(self, cache):
        order = make_order("A1")
        repo = InMemoryOrderRepository([order])
        repo.put_blob("A1", encode_order(order))

        WarmStartLoader(repo, cache, use_blob_mirror=False).load()

        assert repo.calls["get_blob"] == 0
        assert repo.calls["get_order"] == 1

    def test_per_key_failure_is_skipped(self, cache):
        good = make_order("good")
        repo = Mock()
        repo.list_order_uids.return_value = ["good", "bad", "gone"]
        repo.get_blob.return_value = None

        def get_order(uid):
            if uid == "bad":
                raise TransientStoreError("boom")
            if uid == "gone":
                return None
            return good

        repo.get_order.side_effect = get_order

        report = WarmStartLoader(repo, cache).load()

        assert report.total == 3
        assert report.loaded == 1
        assert report.failed == 2
        assert set(cache.dump()) == {"good"}

    def test_list_failure_leaves_cache_empty(self, cache):
        repo = InMemoryOrderRepository([make_order("A1")])
        repo.fail_operations.add("list_order_uids")

        report = WarmStartLoader(repo, cache).load()

        assert report.total == 0
        assert cache.dump() == {}

    def test_presence_mode_skips_per_key_fetch(self, cache):
        repo = InMemoryOrderRepository([make_order("A1"), make_order("B2")])

        report = WarmStartLoader(repo, cache, cache_payloads=False).load()

        assert report.loaded == 2
        assert repo.calls["get_order"] == 0
        assert repo.calls["get_blob"] == 0
        assert cache.get("A1") == (None, True)

    def test_empty_store(self, cache):
        report = WarmStartLoader(InMemoryOrderRepository(), cache).load()
        assert report.total == 0
        assert report.loaded == 0
