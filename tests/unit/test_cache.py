"""Unit tests for the fingerprint cache (TTL, sweep, concurrency)."""

import threading
import time

import pytest

from order_service.infrastructure.cache import FingerprintCache, ReadWriteLock

pytestmark = pytest.mark.unit


class TestFingerprintCache:
    def test_get_miss(self, cache):
        value, found = cache.get("unknown")
        assert value is None
        assert found is False
        assert cache.stats()["misses"] == 1

    def test_set_and_get_payload(self, cache):
        cache.set("A1", b'{"order_uid": "A1"}')

        value, found = cache.get("A1")
        assert found is True
        assert value == b'{"order_uid": "A1"}'
        assert cache.stats()["hits"] == 1

    def test_presence_only_entry(self, cache):
        cache.set("A1")

        assert cache.has("A1") is True
        assert cache.get("A1") == (None, True)

    def test_set_replaces_entry(self, cache, clock):
        cache.set("A1", b"old")
        clock.advance(50)
        cache.set("A1", b"new")
        clock.advance(50)

        # R: Replacement resets the age
        assert cache.get("A1") == (b"new", True)

    def test_delete_is_idempotent(self, cache):
        cache.set("A1")
        cache.delete("A1")
        cache.delete("A1")
        cache.delete("never-set")

        assert cache.has("A1") is False

    def test_expired_entry_reported_absent_before_sweep(self, cache, clock):
        cache.set("A1", b"x")
        clock.advance(61)

        assert cache.has("A1") is False
        assert cache.get("A1") == (None, False)
        assert "A1" not in cache.dump()
        # R: Not physically removed until a sweep runs
        assert cache.stats()["size"] == 1
        assert cache.stats()["expired"] == 2

    def test_entry_live_until_ttl(self, cache, clock):
        cache.set("A1")
        clock.advance(60)
        assert cache.has("A1") is True

    def test_sweep_removes_only_expired(self, cache, clock):
        cache.set("old")
        clock.advance(40)
        cache.set("young")
        clock.advance(21)

        removed = cache.sweep_expired()

        assert removed == 1
        assert cache.stats()["size"] == 1
        assert cache.has("young") is True

    def test_zero_ttl_never_expires(self, clock):
        c = FingerprintCache(0, clock=clock)
        try:
            c.set("A1")
            clock.advance(10**9)
            assert c.has("A1") is True
            assert c.sweep_expired() == 0
            assert c.sweep_interval_seconds is None
        finally:
            c.close()

    def test_default_sweep_interval_is_half_ttl(self, clock):
        c = FingerprintCache(30, clock=clock, start_sweeper=False)
        assert c.sweep_interval_seconds == 15

    def test_dump_is_a_snapshot(self, cache):
        cache.set("A1", b"a")
        snapshot = cache.dump()
        cache.set("B2", b"b")
        cache.delete("A1")

        assert set(snapshot) == {"A1"}
        assert snapshot["A1"].value == b"a"

    def test_background_sweeper_reclaims_expired_entries(self):
        c = FingerprintCache(0.05, sweep_interval_seconds=0.02)
        try:
            c.set("A1")
            deadline = time.monotonic() + 2
            while c.stats()["size"] and time.monotonic() < deadline:
                time.sleep(0.02)
            assert c.stats()["size"] == 0
        finally:
            c.close()

    def test_close_stops_sweeper(self):
        c = FingerprintCache(10)
        sweeper = c._sweeper
        c.close()
        c.close()

        assert sweeper is not None
        assert not sweeper.is_alive()


class TestConcurrency:
    def test_concurrent_operations_are_consistent(self, clock):
        c = FingerprintCache(60, clock=clock, start_sweeper=False)
        errors = []

        def writer(prefix: str) -> None:
            try:
                for i in range(300):
                    c.set(f"{prefix}-{i}", b"v")
                    if i % 3 == 0:
                        c.delete(f"{prefix}-{i}")
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        def reader() -> None:
            try:
                for _ in range(300):
                    c.has("w0-1")
                    c.get("w1-2")
                    for key, entry in c.dump().items():
                        assert entry.created_at == clock.now
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=writer, args=(f"w{n}",)) for n in range(4)]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert errors == []
        # R: 300 keys per writer, every third deleted
        assert len(c.dump()) == 4 * 200
        for n in range(4):
            assert c.has(f"w{n}-0") is False
            assert c.has(f"w{n}-1") is True


class TestReadWriteLock:
    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(2, timeout=2)

        def read() -> None:
            with lock.read():
                inside.wait()

        threads = [threading.Thread(target=read) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=3)

        assert not inside.broken

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        events = []
        writer_in = threading.Event()

        def write() -> None:
            with lock.write():
                writer_in.set()
                time.sleep(0.05)
                events.append("write-done")

        def read() -> None:
            writer_in.wait(2)
            with lock.read():
                events.append("read")

        w = threading.Thread(target=write)
        r = threading.Thread(target=read)
        w.start()
        r.start()
        w.join(2)
        r.join(2)

        assert events == ["write-done", "read"]
