"""Wire a BatchOrchestrator from settings and (optionally injected) clients."""

from __future__ import annotations

from productsync.core.config import AppSettings
from productsync.core.protocols import FileStoreFactory, ICacheBackend, ISQLClient
from productsync.persistence import create_cache, create_file_store_factory, create_sql_client
from productsync.pipeline.orchestrator import BatchOrchestrator
from productsync.sync.cache_sink import CacheSyncSink
from productsync.sync.durable_sink import DurableUpsertSink


def create_orchestrator(
    settings: AppSettings | None = None,
    *,
    sql_client: ISQLClient | None = None,
    cache: ICacheBackend | None = None,
    file_store_factory: FileStoreFactory | None = None,
) -> BatchOrchestrator:
    """Build the orchestrator; only the clients that were not injected are created."""
    if settings is None:
        settings = AppSettings()
    if sql_client is None:
        sql_client = create_sql_client(settings)
    if cache is None:
        cache = create_cache(settings)
    if file_store_factory is None:
        file_store_factory = create_file_store_factory(settings)

    return BatchOrchestrator(
        file_store_factory=file_store_factory,
        durable_sink=DurableUpsertSink(sql_client),
        cache_sink=CacheSyncSink(
            cache,
            ttl_seconds=settings.sync.cache_ttl_seconds,
            index_key=settings.sync.index_key,
            key_prefix=settings.sync.key_prefix,
        ),
        max_workers=settings.sync.max_workers,
        fail_fast=settings.sync.fail_fast,
    )
