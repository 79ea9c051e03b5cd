"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from productsync.core.config import AppSettings
from productsync.persistence.postgres_backend import PostgresClient
from productsync.persistence.redis_backend import RedisCacheBackend
from productsync.persistence.s3_backend import S3FileStoreFactory


def create_sql_client(settings: AppSettings) -> PostgresClient:
    """Open the process-wide PostgreSQL pool. The caller owns and closes it."""
    return PostgresClient(
        settings.postgres.conninfo,
        min_size=settings.postgres.pool_min_size,
        max_size=settings.postgres.pool_max_size,
    )


def create_cache(settings: AppSettings) -> RedisCacheBackend:
    return RedisCacheBackend(
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.db,
        password=settings.redis.password,
        socket_timeout=settings.redis.socket_timeout,
    )


def create_file_store_factory(settings: AppSettings) -> S3FileStoreFactory:
    return S3FileStoreFactory(
        region=settings.s3.region,
        endpoint_url=settings.s3.endpoint_url,
    )

