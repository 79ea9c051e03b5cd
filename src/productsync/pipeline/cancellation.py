"""Cancellation signals checked by the orchestrator at entity boundaries."""

from __future__ import annotations

import time
from typing import Callable


class Deadline:
    """Becomes set once less than ``margin_ms`` of the budget is left.

    Duck-types ``threading.Event.is_set`` so it can be passed wherever a
    cancel signal is accepted.
    """

    def __init__(self, remaining_ms: int, margin_ms: int = 1000,
                 clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._expires_at = clock() + (remaining_ms - margin_ms) / 1000.0

    @classmethod
    def from_lambda_context(cls, context, margin_ms: int = 1000) -> "Deadline | None":
        get_remaining = getattr(context, "get_remaining_time_in_millis", None)
        if get_remaining is None:
            return None
        return cls(get_remaining(), margin_ms)

    def remaining_seconds(self) -> float:
        return self._expires_at - self._clock()

    def is_set(self) -> bool:
        return self.remaining_seconds() <= 0
