"""PostgreSQL client implementing ISQLClient on a psycopg connection pool."""

from __future__ import annotations

from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from productsync.core.exceptions import DurableWriteError


class PostgresClient:
    """Production ISQLClient. The pool is process-wide and thread-safe."""

    def __init__(self, conninfo: str, min_size: int = 1, max_size: int = 4,
                 pool: ConnectionPool | None = None) -> None:
        if pool is None:
            pool = ConnectionPool(
                conninfo, min_size=min_size, max_size=max_size,
                kwargs={"autocommit": True}, open=True,
            )
        self._pool = pool

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> None:
        try:
            with self._pool.connection() as conn:
                conn.execute(sql, params)
        except psycopg.Error as exc:
            raise DurableWriteError(f"PostgreSQL execute failed: {exc}") from exc

    def ping(self) -> bool:
        try:
            with self._pool.connection() as conn:
                conn.execute("SELECT 1")
            return True
        except psycopg.Error as exc:
            raise DurableWriteError(f"PostgreSQL ping failed: {exc}") from exc

    def close(self) -> None:
        self._pool.close()
