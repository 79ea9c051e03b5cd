"""Protocol interfaces for the collaborators the sync core consumes.

Structural typing only: the production backends and the in-memory fakes
satisfy these without inheriting from them.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Object fetch
# ---------------------------------------------------------------------------

@runtime_checkable
class IFileStore(Protocol):
    """S3-compatible read access to one bucket."""

    @property
    def bucket(self) -> str: ...

    def read(self, key: str) -> bytes: ...


FileStoreFactory = Callable[[str], IFileStore]


# ---------------------------------------------------------------------------
# Relational store
# ---------------------------------------------------------------------------

@runtime_checkable
class ISQLClient(Protocol):
    """Parameterized statement execution against PostgreSQL."""

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> None: ...

    def ping(self) -> bool: ...


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def sadd(self, key: str, member: str) -> None: ...

    def ping(self) -> bool: ...


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

@runtime_checkable
class ICancelSignal(Protocol):
    """Anything with ``is_set()``, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...
