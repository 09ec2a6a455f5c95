"""
Name: PostgreSQL Connection Pool

Responsibilities:
  - Manage connection pool lifecycle (init, get, close)
  - Configure connections with statement_timeout
  - Provide singleton pool instance

Collaborators:
  - psycopg_pool: Connection pooling
  - main.py lifespan: init on startup, close on shutdown

Constraints:
  - Singleton pattern (one pool per process)
  - Must init before use, close on shutdown

Notes:
  - Configure callback runs once per new physical connection
  - Thread-safe
"""

import threading
from functools import partial
from typing import Optional

from psycopg_pool import ConnectionPool

from ...logger import logger

# R: Singleton pool instance
_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _configure_connection(conn, statement_timeout_ms: int) -> None:
    """R: Bound every statement on this connection by the store timeout."""
    if statement_timeout_ms > 0:
        conn.execute(f"SET statement_timeout = {int(statement_timeout_ms)}")
        conn.commit()


def init_pool(
    database_url: str,
    min_size: int,
    max_size: int,
    *,
    statement_timeout_ms: int = 0,
    checkout_timeout_seconds: float = 30.0,
) -> ConnectionPool:
    """
    R: Initialize the connection pool.

    Args:
        database_url: PostgreSQL connection string
        min_size: Minimum connections to maintain
        max_size: Maximum connections allowed
        statement_timeout_ms: Per-statement server-side timeout (0 disables)
        checkout_timeout_seconds: Default wait for a free connection

    Raises:
        RuntimeError: If pool already initialized
    """
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise RuntimeError("Connection pool already initialized")

        logger.info(
            "Initializing connection pool",
            extra={"min_size": min_size, "max_size": max_size},
        )

        # R: open=False + open(wait=False) keeps startup alive when the DB is down;
        # store calls then fail with PoolTimeout and are reported as store errors
        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            timeout=checkout_timeout_seconds,
            configure=partial(
                _configure_connection, statement_timeout_ms=statement_timeout_ms
            ),
            open=False,
        )
        _pool.open(wait=False)

        logger.info(
            "Connection pool initialized",
            extra={"min_size": min_size, "max_size": max_size},
        )
        return _pool


def get_pool() -> ConnectionPool:
    """
    R: Get the connection pool singleton.

    Raises:
        RuntimeError: If pool not initialized
    """
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    return _pool


def close_pool() -> None:
    """
    R: Close the connection pool.

    Safe to call even if pool not initialized.
    """
    global _pool

    with _pool_lock:
        if _pool is not None:
            logger.info("Closing connection pool")
            _pool.close()
            _pool = None
            logger.info("Connection pool closed")
