"""Durable upsert sink — idempotent insert-or-update of one product in PostgreSQL."""

from __future__ import annotations

from productsync.core.exceptions import DurableWriteError
from productsync.core.protocols import ISQLClient
from productsync.models.product import Product

UPSERT_PRODUCT_SQL = """
    INSERT INTO products (id, name, image, price, quantity, updated_at)
    VALUES (%s, %s, %s, %s, %s, NOW())
    ON CONFLICT (id) DO UPDATE SET
        name = EXCLUDED.name,
        image = EXCLUDED.image,
        price = EXCLUDED.price,
        quantity = EXCLUDED.quantity,
        updated_at = NOW()
"""


class DurableUpsertSink:
    """Writes products keyed by id; replaying the same product only refreshes updated_at.

    Concurrent upserts of one id are last-writer-wins.
    """

    def __init__(self, sql: ISQLClient) -> None:
        self._sql = sql

    def upsert(self, product: Product) -> None:
        params = (product.id, product.name, product.image, product.price, product.quantity)
        try:
            self._sql.execute(UPSERT_PRODUCT_SQL, params)
        except DurableWriteError:
            raise
        except Exception as exc:
            raise DurableWriteError(
                f"failed to update product {product.id} in PostgreSQL: {exc}"
            ) from exc
