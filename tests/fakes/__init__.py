"""Shared test doubles — re-export memory backends plus a few helpers."""

from __future__ import annotations

from productsync.persistence.memory_backend import (
    MemoryCacheBackend,
    MemoryFileStore,
    MemoryFileStoreFactory,
    MemorySQLClient,
)


class FakeLambdaContext:
    """Minimal stand-in for the Lambda context object."""

    def __init__(self, remaining_ms: int = 60_000) -> None:
        self.remaining_ms = remaining_ms

    def get_remaining_time_in_millis(self) -> int:
        return self.remaining_ms


class CancelAfter:
    """Cancel signal that turns on after ``checks`` calls to is_set()."""

    def __init__(self, checks: int) -> None:
        self._remaining = checks

    def is_set(self) -> bool:
        if self._remaining <= 0:
            return True
        self._remaining -= 1
        return False


__all__ = [
    "CancelAfter",
    "FakeLambdaContext",
    "MemoryCacheBackend",
    "MemoryFileStore",
    "MemoryFileStoreFactory",
    "MemorySQLClient",
]
