"""Integration test fixtures — live PostgreSQL and Redis (e.g. docker compose)."""

from __future__ import annotations

import os

import psycopg
import pytest
import redis

PG_CONNINFO = os.environ.get(
    "PRODUCTSYNC_TEST_PG_CONNINFO",
    "host=localhost port=5432 user=postgres password=postgres dbname=postgres sslmode=disable",
)
REDIS_HOST = os.environ.get("PRODUCTSYNC_TEST_REDIS_HOST", "localhost")

PRODUCTS_DDL = """
    CREATE TABLE IF NOT EXISTS products (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        image TEXT NOT NULL DEFAULT '',
        price DOUBLE PRECISION NOT NULL,
        quantity INTEGER NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    )
"""


def _postgres_available() -> bool:
    try:
        with psycopg.connect(PG_CONNINFO, connect_timeout=2):
            return True
    except Exception:
        return False


def _redis_available() -> bool:
    try:
        return bool(redis.Redis(host=REDIS_HOST, socket_timeout=2).ping())
    except Exception:
        return False


skip_no_postgres = pytest.mark.skipif(not _postgres_available(), reason="PostgreSQL not available")
skip_no_redis = pytest.mark.skipif(not _redis_available(), reason="Redis not available")


@pytest.fixture
def products_table():
    """Fresh products table; dropped afterwards."""
    with psycopg.connect(PG_CONNINFO, autocommit=True) as conn:
        conn.execute("DROP TABLE IF EXISTS products")
        conn.execute(PRODUCTS_DDL)
        yield conn
        conn.execute("DROP TABLE IF EXISTS products")


@pytest.fixture
def redis_db():
    client = redis.Redis(host=REDIS_HOST, db=15, decode_responses=True)
    client.flushdb()
    yield client
    client.flushdb()
