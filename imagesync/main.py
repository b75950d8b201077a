"""
Main application module for the Image Store Sync HTTP trigger.

This module serves as the entry point for the HTTP service, which lets the
hosting web application run a consistency audit on demand.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from imagesync.api.v1.router import api_router
from imagesync.core.config import settings
from imagesync.core.dependencies import create_reconciliation_engine
from imagesync.db.session import dispose_engine
from imagesync.middleware.logging import LoggingMiddleware
from imagesync.utils.logging import configure_logging
from imagesync.utils.metrics import setup_metrics_endpoint

# Configure logging
configure_logging(log_level=settings.LOG_LEVEL)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Context manager for FastAPI lifespan events.

    Builds the reconciliation engine on startup and releases the catalog
    connection pool on shutdown.
    """
    logger.info("Starting up Image Store Sync service")

    engine, db_engine = create_reconciliation_engine(settings)
    app.state.reconciliation_engine = engine

    logger.info(
        "Image Store Sync service started",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )

    yield

    logger.info("Shutting down Image Store Sync service")
    await dispose_engine(db_engine)
    logger.info("Image Store Sync service shut down")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.VERSION,
    docs_url="/api/docs" if settings.SHOW_DOCS else None,
    redoc_url="/api/redoc" if settings.SHOW_DOCS else None,
    openapi_url="/api/openapi.json" if settings.SHOW_DOCS else None,
    lifespan=lifespan,
)

if settings.METRICS_ENABLED:
    setup_metrics_endpoint(app)

app.add_middleware(LoggingMiddleware)

# Register routes
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/api/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        A simple health status
    """
    return {"status": "healthy", "version": settings.VERSION}


def main() -> None:
    """Serve the HTTP trigger with uvicorn."""
    import uvicorn

    uvicorn.run(
        "imagesync.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=str(settings.LOG_LEVEL).lower(),
    )


if __name__ == "__main__":
    main()
