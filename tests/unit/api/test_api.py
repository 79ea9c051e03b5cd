"""Tests for the admin/health HTTP API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fakes import MemoryCacheBackend, MemoryFileStoreFactory, MemorySQLClient
from productsync.api import app as app_module
from productsync.api.app import create_app
from productsync.core.config import AppSettings
from productsync.core.exceptions import CacheError


@pytest.fixture
def backends():
    return MemoryFileStoreFactory(), MemorySQLClient(), MemoryCacheBackend()


@pytest.fixture
def client(backends):
    files, sql, cache = backends
    app = create_app(AppSettings(), sql_client=sql, cache=cache, file_store_factory=files)
    with TestClient(app) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_ready(client):
    resp = client.get("/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"] == {"postgres": "ok", "redis": "ok"}


def test_not_ready_when_redis_down(backends):
    files, sql, _ = backends

    class DownCache(MemoryCacheBackend):
        def ping(self) -> bool:
            raise CacheError("connection refused")

    app = create_app(AppSettings(), sql_client=sql, cache=DownCache(), file_store_factory=files)
    with TestClient(app) as c:
        resp = c.get("/ready")
    assert resp.status_code == 503
    assert resp.json()["checks"]["redis"] == "unavailable"


def test_ingest_runs_batch(client, backends):
    files, sql, _ = backends
    files("uploads").put("a.csv", b"id,name,image,price,quantity\np1,Lamp,,1,1\n")

    resp = client.post("/admin/ingest", json={"bucket": "uploads", "key": "a.csv"})

    assert resp.status_code == 200
    assert resp.json()["status"] == "DONE"
    assert set(sql.rows) == {"p1"}


def test_ingest_structural_failure_is_502(client):
    resp = client.post("/admin/ingest", json={"bucket": "uploads", "key": "nope.csv"})
    assert resp.status_code == 502
    assert resp.json()["detail"]["status"] == "FAILED"


def test_ingest_requires_bucket_and_key(client):
    assert client.post("/admin/ingest", json={"bucket": "uploads"}).status_code == 422


class ClosableSQL(MemorySQLClient):
    def __init__(self) -> None:
        super().__init__()
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_injected_sql_client_is_left_open(backends):
    files, _, cache = backends
    sql = ClosableSQL()
    with TestClient(create_app(AppSettings(), sql_client=sql, cache=cache,
                               file_store_factory=files)):
        pass
    assert sql.closed is False


def test_pool_created_at_startup_is_closed(backends, monkeypatch):
    files, _, cache = backends
    owned = ClosableSQL()
    monkeypatch.setattr(app_module, "create_sql_client", lambda settings: owned)
    with TestClient(create_app(AppSettings(), cache=cache, file_store_factory=files)) as c:
        assert c.get("/ready").status_code == 200
    assert owned.closed is True
