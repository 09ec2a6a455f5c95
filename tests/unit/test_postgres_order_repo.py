"""
Unit tests for PostgresOrderRepository with a mocked pool.

Covers:
  - Insert-or-ignore result mapping
  - Driver error translation (timeouts vs other failures)
  - Bounded pool checkout
"""

from unittest.mock import MagicMock

import psycopg
import pytest
from psycopg import errors as pg_errors
from psycopg_pool import PoolTimeout

from conftest import make_order
from order_service.exceptions import (
    RejectedOrderError,
    StoreTimeoutError,
    TransientStoreError,
)
from order_service.infrastructure.repositories.postgres_order_repo import (
    PostgresOrderRepository,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def conn():
    return MagicMock()


@pytest.fixture
def pool(conn):
    p = MagicMock()
    p.connection.return_value.__enter__.return_value = conn
    return p


@pytest.fixture
def repo(pool):
    return PostgresOrderRepository(pool, timeout_seconds=2.5)


class TestSaveIfAbsent:
    def test_inserted(self, repo, conn):
        conn.execute.return_value.fetchone.return_value = ("A1",)

        assert repo.save_if_absent(make_order("A1", items=2)) is True
        conn.transaction.assert_called_once()
        # R: orders + delivery + payment
        assert conn.execute.call_count == 3
        cursor = conn.cursor.return_value.__enter__.return_value
        assert len(cursor.executemany.call_args.args[1]) == 2

    def test_already_present(self, repo, conn):
        conn.execute.return_value.fetchone.return_value = None

        assert repo.save_if_absent(make_order("A1")) is False
        # R: Children untouched when the order row already exists
        assert conn.execute.call_count == 1

    def test_checkout_is_bounded(self, repo, pool, conn):
        conn.execute.return_value.fetchone.return_value = ("A1",)
        repo.save_if_absent(make_order("A1"))
        pool.connection.assert_called_with(timeout=2.5)


class TestErrorMapping:
    @pytest.mark.parametrize(
        "driver_error, expected",
        [
            (pg_errors.QueryCanceled("canceling statement"), StoreTimeoutError),
            (PoolTimeout("no connection"), StoreTimeoutError),
            (psycopg.OperationalError("connection refused"), TransientStoreError),
            (pg_errors.StringDataRightTruncation("value too long"), RejectedOrderError),
            (pg_errors.NumericValueOutOfRange("numeric overflow"), RejectedOrderError),
            (pg_errors.ForeignKeyViolation("missing order"), RejectedOrderError),
        ],
    )
    def test_errors_translated(self, repo, conn, driver_error, expected):
        conn.execute.side_effect = driver_error

        with pytest.raises(expected) as exc_info:
            repo.get_order("A1")
        assert exc_info.value.original_error is driver_error

    def test_rejection_is_not_retryable(self, repo, conn):
        conn.execute.side_effect = pg_errors.StringDataRightTruncation("too long")

        with pytest.raises(RejectedOrderError) as exc_info:
            repo.save_if_absent(make_order("X" * 300))
        assert not isinstance(exc_info.value, TransientStoreError)

    def test_timeout_is_a_transient_store_error(self, repo, pool):
        pool.connection.side_effect = PoolTimeout("no connection")

        with pytest.raises(TransientStoreError):
            repo.list_order_uids()


class TestReads:
    def test_get_order_not_found(self, repo, conn):
        conn.execute.return_value.fetchone.return_value = None
        assert repo.get_order("ZZZ") is None

    def test_get_blob(self, repo, conn):
        conn.execute.return_value.fetchone.return_value = (memoryview(b"{}"),)
        assert repo.get_blob("A1") == b"{}"

    def test_get_blob_absent(self, repo, conn):
        conn.execute.return_value.fetchone.return_value = None
        assert repo.get_blob("A1") is None

    def test_list_order_uids(self, repo, conn):
        conn.execute.return_value.fetchall.return_value = [("A1",), ("B2",)]
        assert repo.list_order_uids() == ["A1", "B2"]
