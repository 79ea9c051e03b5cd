"""Tests for the idempotent PostgreSQL upsert sink."""

from __future__ import annotations

import pytest

from fakes import MemorySQLClient
from productsync.core.exceptions import DurableWriteError
from productsync.models.product import Product
from productsync.sync.durable_sink import UPSERT_PRODUCT_SQL, DurableUpsertSink


@pytest.fixture
def sql():
    return MemorySQLClient()


@pytest.fixture
def sink(sql):
    return DurableUpsertSink(sql)


PRODUCT = Product(id="p1", name="Lamp", image="lamp.png", price=19.99, quantity=4)


class TestUpsert:
    def test_issues_one_parameterized_statement(self, sink, sql):
        sink.upsert(PRODUCT)
        assert sql.executed == [(UPSERT_PRODUCT_SQL, ("p1", "Lamp", "lamp.png", 19.99, 4))]

    def test_statement_is_keyed_on_id_and_refreshes_timestamp(self):
        assert "ON CONFLICT (id) DO UPDATE" in UPSERT_PRODUCT_SQL
        assert "updated_at = NOW()" in UPSERT_PRODUCT_SQL
        for column in ("name", "image", "price", "quantity"):
            assert f"{column} = EXCLUDED.{column}" in UPSERT_PRODUCT_SQL

    def test_repeating_the_same_product_leaves_same_row(self, sink, sql):
        sink.upsert(PRODUCT)
        first = dict(sql.rows)
        sink.upsert(PRODUCT)
        assert sql.rows == first
        assert len(sql.executed) == 2

    def test_later_write_wins(self, sink, sql):
        sink.upsert(PRODUCT)
        sink.upsert(PRODUCT.model_copy(update={"name": "Brass lamp"}))
        assert sql.rows["p1"][1] == "Brass lamp"


class TestErrors:
    def test_client_error_propagates_as_durable_write_error(self, sink, sql):
        sql.fail_for("p1")
        with pytest.raises(DurableWriteError):
            sink.upsert(PRODUCT)

    def test_unexpected_error_is_wrapped(self):
        class Broken:
            def execute(self, sql, params=()):
                raise ConnectionResetError("peer went away")

        with pytest.raises(DurableWriteError, match="p1 in PostgreSQL"):
            DurableUpsertSink(Broken()).upsert(PRODUCT)
