"""Redis cache backend implementing ICacheBackend."""

from __future__ import annotations

import redis

from productsync.core.exceptions import CacheError


class RedisCacheBackend:
    """Production ICacheBackend backed by Redis."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 password: str | None = None, socket_timeout: float | None = 5.0) -> None:
        self._host = host
        self._port = port
        self._db = db
        self._client = redis.Redis(
            host=host, port=port, db=db, password=password,
            socket_timeout=socket_timeout, decode_responses=True,
        )

    def setex(self, key: str, ttl: int, value: str) -> None:
        try:
            self._client.setex(key, ttl, value)
        except Exception as exc:
            raise CacheError(f"Redis SETEX failed for key={key!r}: {exc}") from exc

    def sadd(self, key: str, member: str) -> None:
        try:
            self._client.sadd(key, member)
        except Exception as exc:
            raise CacheError(f"Redis SADD failed for key={key!r}: {exc}") from exc

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except Exception as exc:
            raise CacheError(f"Redis PING failed for {self._host}:{self._port}: {exc}") from exc
