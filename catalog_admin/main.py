"""
FastAPI Application

Main entry point for the Catalog Admin API.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from catalog_admin.assembly.errors import FetchError, NotFoundError
from catalog_admin.config import get_settings
from catalog_admin.config.logging import configure_logging
from catalog_admin.database.connection import close_database, create_schema, init_database
from catalog_admin.serving.api.middleware import RequestLoggingMiddleware
from catalog_admin.serving.api.routes import (
    catalog_router,
    categories_router,
    health_router,
    products_router,
    variants_router,
)

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()

    logger.info("Starting Catalog Admin API")

    try:
        await init_database()
        if settings.is_development:
            await create_schema()
    except Exception as e:
        logger.warning("Database init failed", error=str(e))

    yield

    logger.info("Shutting down...")
    await close_database()


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc), "entity": exc.entity, "id": exc.entity_id},
    )


async def fetch_error_handler(request: Request, exc: FetchError) -> JSONResponse:
    logger.error("View build aborted", collection=exc.collection, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"Could not load {exc.collection}"},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error", error=str(exc.orig))
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "Operation conflicts with existing catalog data"},
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Catalog Admin API",
        description="Product catalog administration and catalog views",
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(FetchError, fetch_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(catalog_router, prefix="/api/v1/catalog", tags=["Catalog"])
    app.include_router(categories_router, prefix="/api/v1/categories", tags=["Categories"])
    app.include_router(products_router, prefix="/api/v1/products", tags=["Products"])
    app.include_router(variants_router, prefix="/api/v1", tags=["Variants"])

    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": "Catalog Admin API",
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
