"""Batch and invocation result models."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from productsync.core.exceptions import StructuralError
from productsync.core.types import JsonDict


class BatchStatus(StrEnum):
    FETCHING = "FETCHING"
    PARSING = "PARSING"
    PROCESSING = "PROCESSING"
    DONE = "DONE"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    NOT_ATTEMPTED = "NOT_ATTEMPTED"


class FailureStage(StrEnum):
    VALIDATION = "validation"
    DURABLE = "durable"
    CACHE = "cache"


class ObjectLocation(BaseModel):
    """Bucket + key named by one trigger notification."""

    bucket: str
    key: str

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


class EntityFailure(BaseModel):
    """A product that was skipped or only partly propagated."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    row: int  # 1-based CSV record after the header, blank records counted; same as ParseError.row
    product_id: str
    stage: FailureStage
    message: str
    error: Optional[Exception] = Field(default=None, exclude=True)


class BatchResult(BaseModel):
    """Outcome of one object (one batch)."""

    location: ObjectLocation
    status: BatchStatus = BatchStatus.FETCHING
    reason: str = ""
    total: int = 0
    succeeded: int = 0
    skipped: int = 0  # not started because of cancellation
    failures: list[EntityFailure] = Field(default_factory=list)

    @property
    def structural_failure(self) -> bool:
        return self.status == BatchStatus.FAILED

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def aggregate_error(self) -> ExceptionGroup | None:
        """All per-entity errors joined into one value, or None if there were none."""
        if not self.failures:
            return None
        errors = [f.error or RuntimeError(f.message) for f in self.failures]
        return ExceptionGroup(
            f"{len(errors)} product(s) failed in {self.location}", errors,
        )

    def summary(self) -> JsonDict:
        return {
            "location": str(self.location),
            "status": str(self.status),
            "reason": self.reason,
            "total": self.total,
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "failures": [f.model_dump(mode="json") for f in self.failures],
        }


class InvocationResult(BaseModel):
    """Outcome of one trigger invocation (one or more objects)."""

    batches: list[BatchResult] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(
            b.status not in (BatchStatus.FAILED, BatchStatus.CANCELLED)
            for b in self.batches
        )

    @property
    def failure_count(self) -> int:
        return sum(b.failure_count for b in self.batches)

    def raise_for_status(self) -> None:
        """Raise StructuralError for the first batch that did not complete."""
        for batch in self.batches:
            if batch.status in (BatchStatus.FAILED, BatchStatus.CANCELLED):
                raise StructuralError(f"{batch.location}: {batch.reason}")

    def summary(self) -> JsonDict:
        return {
            "ok": self.ok,
            "failure_count": self.failure_count,
            "batches": [b.summary() for b in self.batches],
        }
