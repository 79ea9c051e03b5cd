"""Admin endpoints for triggering a batch by hand."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from productsync.models.batch import BatchStatus, ObjectLocation

router = APIRouter(tags=["admin"])


@router.post("/ingest")
def ingest(location: ObjectLocation, request: Request) -> dict:
    """Run one object through the sync pipeline and return its batch summary."""
    result = request.app.state.orchestrator.process(location)
    if result.status == BatchStatus.FAILED:
        raise HTTPException(status_code=502, detail=result.summary())
    return result.summary()
