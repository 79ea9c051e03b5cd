"""Lambda entrypoint — S3 ObjectCreated notifications in, batch sync out.

Clients are built on the first invocation and reused for the life of the
process.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import unquote_plus

from productsync.core.config import AppSettings
from productsync.core.exceptions import ProductSyncError
from productsync.core.logging_setup import configure_logging
from productsync.core.protocols import FileStoreFactory, ICacheBackend, ISQLClient
from productsync.core.types import JsonDict
from productsync.models.batch import ObjectLocation
from productsync.persistence import create_cache, create_sql_client
from productsync.pipeline.cancellation import Deadline
from productsync.pipeline.factory import create_orchestrator
from productsync.pipeline.orchestrator import BatchOrchestrator

logger = logging.getLogger(__name__)

_settings: AppSettings | None = None
_orchestrator: BatchOrchestrator | None = None


def init(
    settings: AppSettings | None = None,
    *,
    sql_client: ISQLClient | None = None,
    cache: ICacheBackend | None = None,
    file_store_factory: FileStoreFactory | None = None,
) -> BatchOrchestrator:
    """Process-wide initialization. Safe to call again; later calls are no-ops.

    PostgreSQL and Redis are pinged before anything is cached, so a cold
    start against an unreachable store fails here instead of per product.

    Raises:
        DurableWriteError, CacheError: a store did not answer the ping.
    """
    global _settings, _orchestrator
    if _orchestrator is not None:
        return _orchestrator
    settings = settings or AppSettings()
    configure_logging(settings.log_level)

    owned_sql = create_sql_client(settings) if sql_client is None else None
    sql_client = sql_client if owned_sql is None else owned_sql
    cache = cache if cache is not None else create_cache(settings)
    for name, client in (("PostgreSQL", sql_client), ("Redis", cache)):
        try:
            client.ping()
        except ProductSyncError as exc:
            logger.error("Failed to initialize %s: %s", name, exc)
            if owned_sql is not None:
                owned_sql.close()
            raise
        logger.info("Successfully connected to %s", name)

    _settings = settings
    _orchestrator = create_orchestrator(
        settings, sql_client=sql_client, cache=cache, file_store_factory=file_store_factory,
    )
    logger.info("ProductSync initialized for environment=%s", _settings.environment)
    return _orchestrator


def reset() -> None:
    """Drop process-wide state (tests)."""
    global _settings, _orchestrator
    _settings = None
    _orchestrator = None


def locations_from_event(event: JsonDict) -> list[ObjectLocation]:
    """Extract bucket/key pairs from an S3 event, in delivery order."""
    locations: list[ObjectLocation] = []
    for record in event.get("Records", []):
        s3 = record.get("s3", {})
        bucket = s3.get("bucket", {}).get("name")
        key = s3.get("object", {}).get("key")
        if not bucket or not key:
            logger.warning("Skipping event record without bucket/key: %s", record.get("eventName"))
            continue
        # S3 notifications URL-encode object keys
        locations.append(ObjectLocation(bucket=bucket, key=unquote_plus(key)))
    return locations


def lambda_handler(event: JsonDict, context: Any = None) -> JsonDict:
    """Run every object in the event through the orchestrator.

    Raises:
        StructuralError: an object could not be fetched or parsed, so the
            trigger runtime reports the invocation as failed.
    """
    orchestrator = init()
    margin_ms = _settings.sync.deadline_margin_ms if _settings else 1000
    deadline = Deadline.from_lambda_context(context, margin_ms)

    result = orchestrator.process_event(locations_from_event(event), cancel=deadline)
    summary = result.summary()

    for batch in result.batches:
        error = batch.aggregate_error()
        if error is not None:
            logger.warning("%s", error, extra={"batch": str(batch.location)})

    logger.info("Invocation finished ok=%s failures=%d", result.ok, result.failure_count)
    result.raise_for_status()
    return summary
