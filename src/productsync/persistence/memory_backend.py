"""In-memory backends for unit tests and local runs — dict-backed fakes."""

from __future__ import annotations

from typing import Any

from productsync.core.exceptions import CacheError, DurableWriteError, FetchError


class MemoryFileStore:
    """Dict-backed IFileStore for one bucket."""

    def __init__(self, bucket: str = "test-bucket") -> None:
        self._bucket = bucket
        self._files: dict[str, bytes] = {}
        self.reads: list[str] = []

    @property
    def bucket(self) -> str:
        return self._bucket

    def put(self, key: str, data: bytes) -> None:
        self._files[key] = data

    def read(self, key: str) -> bytes:
        self.reads.append(key)
        try:
            return self._files[key]
        except KeyError:
            raise FetchError(self._bucket, key, "NoSuchKey") from None


class MemoryFileStoreFactory:
    """FileStoreFactory over per-bucket MemoryFileStores."""

    def __init__(self) -> None:
        self.stores: dict[str, MemoryFileStore] = {}

    def __call__(self, bucket: str) -> MemoryFileStore:
        if bucket not in self.stores:
            self.stores[bucket] = MemoryFileStore(bucket)
        return self.stores[bucket]


class MemorySQLClient:
    """Recording ISQLClient for unit tests.

    Keeps every executed statement and a row per first parameter, which is
    how the products upsert is keyed.
    """

    def __init__(self) -> None:
        self.executed: list[tuple[str, tuple[Any, ...]]] = []
        self.rows: dict[Any, tuple[Any, ...]] = {}
        self._fail_on: set[Any] = set()

    def fail_for(self, key: Any) -> None:
        """Reject statements whose first parameter is ``key``."""
        self._fail_on.add(key)

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> None:
        if params and params[0] in self._fail_on:
            raise DurableWriteError(f"rejected write for {params[0]!r}")
        self.executed.append((sql, params))
        if params:
            self.rows[params[0]] = params

    def ping(self) -> bool:
        return True


class MemoryCacheBackend:
    """Dict-backed ICacheBackend for unit tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self._ttls: dict[str, int] = {}
        self._sets: dict[str, set[str]] = {}
        self._fail_setex: set[str] = set()
        self._fail_sadd: set[str] = set()

    def fail_setex_for(self, key: str) -> None:
        self._fail_setex.add(key)

    def fail_sadd_for(self, member: str) -> None:
        self._fail_sadd.add(member)

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def ttl(self, key: str) -> int | None:
        return self._ttls.get(key)

    def smembers(self, key: str) -> set[str]:
        return set(self._sets.get(key, set()))

    def setex(self, key: str, ttl: int, value: str) -> None:
        if key in self._fail_setex:
            raise CacheError(f"SETEX rejected for key={key!r}")
        self._store[key] = value
        self._ttls[key] = ttl

    def sadd(self, key: str, member: str) -> None:
        if member in self._fail_sadd:
            raise CacheError(f"SADD rejected for member={member!r}")
        self._sets.setdefault(key, set()).add(member)

    def ping(self) -> bool:
        return True
