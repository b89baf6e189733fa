"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from src.api.middleware.error_handler import setup_exception_handlers
from src.api.routes import (
    categories_router,
    health_router,
    items_router,
    reparations_router,
    services_router,
    stock_transactions_router,
    suppliers_router,
    vehicles_router,
)
from src.config import configure_logging, get_logger, get_settings
from src.core.exceptions import DatabaseError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Runs migrations and opens the connection pool on startup, closes the
    pool on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
    )

    try:
        from src.infrastructure.storage.sqlite import get_pool
        from src.infrastructure.storage.sqlite.migrations.migrator import run_migrations

        results = await run_migrations()
        failed = [r for r in results if not r.success]
        if failed:
            raise DatabaseError(f"migration {failed[0].version}", failed[0].error or "")
        logger.info("database_initialized", applied=len(results))

        await get_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    try:
        from src.infrastructure.storage.sqlite import close_pool

        await close_pool()
        logger.info("connection_pool_closed")

    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Garage parts inventory, stock ledger and reparations",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(items_router)
    app.include_router(stock_transactions_router)
    app.include_router(reparations_router)
    app.include_router(categories_router)
    app.include_router(suppliers_router)
    app.include_router(services_router)
    app.include_router(vehicles_router)

    # Root health endpoint (for k8s/docker health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        """Simple health check at root level."""
        return {"status": "healthy", "version": settings.app_version}

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
