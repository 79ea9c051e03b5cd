"""Health check endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from productsync.core.exceptions import ProductSyncError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
def ready(request: Request) -> JSONResponse:
    checks: dict[str, str] = {}
    for name, client in (("postgres", request.app.state.sql_client),
                         ("redis", request.app.state.cache)):
        try:
            client.ping()
            checks[name] = "ok"
        except ProductSyncError as exc:
            logger.warning("Readiness check %s failed: %s", name, exc)
            checks[name] = "unavailable"

    ok = all(v == "ok" for v in checks.values())
    return JSONResponse(
        status_code=200 if ok else 503,
        content={"status": "ready" if ok else "not_ready", "checks": checks},
    )
