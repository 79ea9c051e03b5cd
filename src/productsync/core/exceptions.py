"""ProductSync exception hierarchy."""

from __future__ import annotations


class ProductSyncError(Exception):
    """Base exception for all ProductSync errors."""


class StructuralError(ProductSyncError):
    """The payload as a whole could not be fetched or parsed. Fatal for a batch."""


class FetchError(StructuralError):
    """Object could not be read from the file store."""

    def __init__(self, bucket: str, key: str, message: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(f"failed to get object {key} from bucket {bucket}: {message}")


class ParseError(StructuralError):
    """Delimited text could not be turned into products."""

    def __init__(self, message: str, row: int | None = None) -> None:
        self.row = row
        where = f" (row {row})" if row is not None else ""
        super().__init__(f"failed to parse CSV{where}: {message}")


class ProductValidationError(ProductSyncError):
    """A product violates a business rule."""

    def __init__(self, product_id: str, rule: str, message: str) -> None:
        self.product_id = product_id
        self.rule = rule
        super().__init__(f"invalid product {product_id}: {message}")


class DurableWriteError(ProductSyncError):
    """PostgreSQL rejected a write or is unreachable."""


class CacheError(ProductSyncError):
    """Redis cache operation failed."""


class CacheSyncError(CacheError):
    """One or both cache sub-operations failed for a product."""

    def __init__(self, product_id: str, failures: dict[str, Exception]) -> None:
        self.product_id = product_id
        self.failures = failures
        detail = "; ".join(f"{step}: {exc}" for step, exc in failures.items())
        super().__init__(f"failed to update product {product_id} in cache: {detail}")
