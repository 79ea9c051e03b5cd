"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from productsync.api.routes import admin, health
from productsync.core.config import AppSettings
from productsync.core.logging_setup import configure_logging
from productsync.core.protocols import FileStoreFactory, ICacheBackend, ISQLClient
from productsync.persistence import create_cache, create_file_store_factory, create_sql_client
from productsync.pipeline.factory import create_orchestrator


def create_app(
    settings: AppSettings | None = None,
    *,
    sql_client: ISQLClient | None = None,
    cache: ICacheBackend | None = None,
    file_store_factory: FileStoreFactory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Clients that are not injected are built from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize and tear down application resources."""
        app_settings = settings or AppSettings()
        configure_logging(app_settings.log_level)
        # Only the pool created here is closed on shutdown
        owned_sql = create_sql_client(app_settings) if sql_client is None else None
        sql = sql_client if owned_sql is None else owned_sql
        cache_backend = cache if cache is not None else create_cache(app_settings)
        factory = (file_store_factory if file_store_factory is not None
                   else create_file_store_factory(app_settings))

        app.state.settings = app_settings
        app.state.sql_client = sql
        app.state.cache = cache_backend
        app.state.orchestrator = create_orchestrator(
            app_settings, sql_client=sql, cache=cache_backend, file_store_factory=factory,
        )
        try:
            yield
        finally:
            if owned_sql is not None:
                owned_sql.close()

    app = FastAPI(
        title="ProductSync",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(admin.router, prefix="/admin")
    return app
