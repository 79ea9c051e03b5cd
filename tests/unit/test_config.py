"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

from productsync.core.config import AppSettings, PostgresConfig, RedisConfig, SyncConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.s3.region == "us-west-2"


def test_sync_config_defaults():
    config = SyncConfig()
    assert config.cache_ttl_seconds == 86400
    assert config.index_key == "products:list"
    assert config.key_prefix == "product"
    assert config.max_workers == 1
    assert config.fail_fast is True


def test_postgres_conninfo_requires_ssl():
    config = PostgresConfig(host="db.example", port=6543, user="sync", password="pw", dbname="shop")
    assert config.conninfo == (
        "host=db.example port=6543 user=sync password=pw dbname=shop "
        "sslmode=require connect_timeout=5"
    )


def test_redis_env_override(monkeypatch):
    monkeypatch.setenv("PRODUCTSYNC_REDIS_HOST", "cache.internal")
    monkeypatch.setenv("PRODUCTSYNC_REDIS_DB", "3")
    config = RedisConfig()
    assert config.host == "cache.internal"
    assert config.db == 3
