"""BatchOrchestrator — fetch, parse, validate and sync one object's products.

Per batch the state runs FETCHING -> PARSING -> PROCESSING -> DONE. Fetch
and parse failures end in FAILED before any sink is touched. Everything that
goes wrong for a single product is recorded on the BatchResult and the batch
carries on:

    validate -> durable upsert -> cache sync

A validation failure skips both sinks, a durable failure skips the cache,
and a cache failure only gets recorded.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from productsync.core.exceptions import (
    CacheError,
    DurableWriteError,
    ProductSyncError,
    ProductValidationError,
    StructuralError,
)
from productsync.core.protocols import FileStoreFactory, ICancelSignal
from productsync.models.batch import (
    BatchResult,
    BatchStatus,
    EntityFailure,
    FailureStage,
    InvocationResult,
    ObjectLocation,
)
from productsync.models.product import Product
from productsync.pipeline.record_parser import parse_rows
from productsync.pipeline.validator import validate
from productsync.sync.cache_sink import CacheSyncSink
from productsync.sync.durable_sink import DurableUpsertSink

logger = logging.getLogger(__name__)

_Outcomes = dict[int, Optional[EntityFailure]]


def _is_cancelled(cancel: ICancelSignal | None) -> bool:
    return cancel is not None and cancel.is_set()


class BatchOrchestrator:
    """Drives batches through the sinks. Holds no state between batches."""

    def __init__(
        self,
        *,
        file_store_factory: FileStoreFactory,
        durable_sink: DurableUpsertSink,
        cache_sink: CacheSyncSink,
        max_workers: int = 1,
        fail_fast: bool = True,
    ) -> None:
        self._file_store_factory = file_store_factory
        self._durable = durable_sink
        self._cache = cache_sink
        self._max_workers = max(1, max_workers)
        self._fail_fast = fail_fast

    # ---- invocation ----

    def process_event(self, locations: Iterable[ObjectLocation],
                      cancel: ICancelSignal | None = None) -> InvocationResult:
        """Process each object in delivery order.

        With fail_fast, the first FAILED or CANCELLED batch stops the
        invocation and the remaining objects are reported as NOT_ATTEMPTED.
        """
        invocation = InvocationResult()
        pending = list(locations)
        for pos, location in enumerate(pending):
            result = self.process(location, cancel)
            invocation.batches.append(result)
            if self._fail_fast and result.status in (BatchStatus.FAILED, BatchStatus.CANCELLED):
                for rest in pending[pos + 1:]:
                    invocation.batches.append(BatchResult(
                        location=rest,
                        status=BatchStatus.NOT_ATTEMPTED,
                        reason=f"aborted after {location} ended {result.status}",
                    ))
                break
        return invocation

    # ---- batch ----

    def process(self, location: ObjectLocation,
                cancel: ICancelSignal | None = None) -> BatchResult:
        result = BatchResult(location=location)
        log_extra = {"batch": str(location)}

        if _is_cancelled(cancel):
            result.status = BatchStatus.CANCELLED
            result.reason = "cancelled before fetch"
            logger.warning("Batch cancelled before fetch", extra=log_extra)
            return result

        try:
            store = self._file_store_factory(location.bucket)
            data = store.read(location.key)
            result.status = BatchStatus.PARSING
            rows = parse_rows(data)
        except StructuralError as exc:
            failed_in = result.status
            result.status = BatchStatus.FAILED
            result.reason = str(exc)
            logger.error("Batch failed while %s: %s", failed_in.lower(), exc, extra=log_extra)
            return result

        result.status = BatchStatus.PROCESSING
        result.total = len(rows)

        if self._max_workers > 1 and len(rows) > 1:
            outcomes = self._run_partitioned(rows, location, cancel)
        else:
            outcomes = self._run_rows(rows, location, cancel)

        result.failures = [outcomes[row] for row in sorted(outcomes) if outcomes[row] is not None]
        result.succeeded = len(outcomes) - len(result.failures)
        result.skipped = result.total - len(outcomes)

        if result.skipped:
            result.status = BatchStatus.CANCELLED
            result.reason = f"cancelled after {len(outcomes)} of {result.total} products"
            logger.warning("Batch %s", result.reason, extra=log_extra)
        else:
            result.status = BatchStatus.DONE

        logger.info(
            "Batch finished: %d products, %d synced, %d failed, %d skipped",
            result.total, result.succeeded, result.failure_count, result.skipped,
            extra=log_extra,
        )
        return result

    def _run_rows(self, rows: list[tuple[int, Product]], location: ObjectLocation,
                  cancel: ICancelSignal | None) -> _Outcomes:
        outcomes: _Outcomes = {}
        for row, product in rows:
            # Entity boundary: a started product always finishes both sinks
            if _is_cancelled(cancel):
                break
            outcomes[row] = self._process_product(row, product, location)
        return outcomes

    def _run_partitioned(self, rows: list[tuple[int, Product]], location: ObjectLocation,
                         cancel: ICancelSignal | None) -> _Outcomes:
        """Run distinct ids in parallel; rows sharing an id stay in file order."""
        partitions: dict[str, list[tuple[int, Product]]] = {}
        for row, product in rows:
            partitions.setdefault(product.id, []).append((row, product))

        outcomes: _Outcomes = {}
        with ThreadPoolExecutor(max_workers=self._max_workers,
                                thread_name_prefix="productsync") as pool:
            futures = [
                pool.submit(self._run_rows, part, location, cancel)
                for part in partitions.values()
            ]
            for future in futures:
                outcomes.update(future.result())
        return outcomes

    # ---- product ----

    def _process_product(self, row: int, product: Product,
                         location: ObjectLocation) -> Optional[EntityFailure]:
        try:
            validate(product)
        except ProductValidationError as exc:
            return self._failure(row, product, FailureStage.VALIDATION, exc, location)

        try:
            self._durable.upsert(product)
        except DurableWriteError as exc:
            return self._failure(row, product, FailureStage.DURABLE, exc, location)

        try:
            self._cache.sync(product)
        except CacheError as exc:
            return self._failure(row, product, FailureStage.CACHE, exc, location)

        return None

    @staticmethod
    def _failure(row: int, product: Product, stage: FailureStage,
                 exc: ProductSyncError, location: ObjectLocation) -> EntityFailure:
        logger.warning("Row %d product %r %s failure: %s", row, product.id, stage, exc,
                       extra={"batch": str(location)})
        return EntityFailure(
            row=row, product_id=product.id, stage=stage, message=str(exc), error=exc,
        )
