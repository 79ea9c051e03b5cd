"""Cache sync sink — best-effort Redis projection of a product."""

from __future__ import annotations

from productsync.core.exceptions import CacheSyncError
from productsync.core.protocols import ICacheBackend
from productsync.models.product import Product

DEFAULT_TTL = 24 * 60 * 60


class CacheSyncSink:
    """Stores ``<prefix>:<id>`` with a TTL and adds the id to the index set.

    Both steps are always attempted. The index set never expires, so it may
    list ids whose snapshot is gone.
    """

    def __init__(self, cache: ICacheBackend, ttl_seconds: int = DEFAULT_TTL,
                 index_key: str = "products:list", key_prefix: str = "product") -> None:
        self._cache = cache
        self._ttl = ttl_seconds
        self._index_key = index_key
        self._key_prefix = key_prefix

    def sync(self, product: Product) -> None:
        failures: dict[str, Exception] = {}

        try:
            self._cache.setex(product.cache_key(self._key_prefix), self._ttl,
                              product.model_dump_json())
        except Exception as exc:
            failures["set_snapshot"] = exc

        try:
            self._cache.sadd(self._index_key, product.id)
        except Exception as exc:
            failures["add_to_index"] = exc

        if failures:
            raise CacheSyncError(product.id, failures)
