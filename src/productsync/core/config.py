"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class PostgresConfig(BaseSettings):
    """PostgreSQL (durable product store) configuration."""

    model_config = {"env_prefix": "PRODUCTSYNC_PG_"}

    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = ""
    dbname: str = "products"
    sslmode: str = "require"
    connect_timeout: int = 5
    pool_min_size: int = 1
    pool_max_size: int = 4

    @property
    def conninfo(self) -> str:
        return (
            f"host={self.host} port={self.port} user={self.user} "
            f"password={self.password} dbname={self.dbname} "
            f"sslmode={self.sslmode} connect_timeout={self.connect_timeout}"
        )


class RedisConfig(BaseSettings):
    """Redis cache configuration."""

    model_config = {"env_prefix": "PRODUCTSYNC_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    password: str | None = None
    db: int = 0
    socket_timeout: float = 5.0


class S3Config(BaseSettings):
    """S3 object fetch configuration."""

    model_config = {"env_prefix": "PRODUCTSYNC_S3_"}

    region: str = "us-west-2"
    endpoint_url: str | None = None  # LocalStack override


class SyncConfig(BaseSettings):
    """Batch sync behaviour."""

    model_config = {"env_prefix": "PRODUCTSYNC_SYNC_"}

    cache_ttl_seconds: int = 24 * 60 * 60
    key_prefix: str = "product"
    index_key: str = "products:list"
    max_workers: int = 1
    fail_fast: bool = True  # one structural failure aborts the whole invocation
    deadline_margin_ms: int = 1000


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "PRODUCTSYNC_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    postgres: PostgresConfig = PostgresConfig()
    redis: RedisConfig = RedisConfig()
    s3: S3Config = S3Config()
    sync: SyncConfig = SyncConfig()
