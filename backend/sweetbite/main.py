"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sweetbite.api.middleware import LoggingMiddleware
from sweetbite.api.routes import router
from sweetbite.config import Settings, get_settings
from sweetbite.errors import CatalogLoadError, CatalogWriteError, OrderPlacementError
from sweetbite.models.request import ErrorResponse
from sweetbite.services.product_service import ProductService
from sweetbite.services.store import Store
from sweetbite.utils.logger import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


def create_app(store: Optional[Store] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the application.

    When ``store`` is given it is served as is; otherwise one is created at
    startup with a connected ProductService and an initial catalog load.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        if getattr(app.state, "store", None) is not None:
            yield
            return

        logger.info("Starting application...")
        product_service = ProductService(settings)
        try:
            await product_service.connect()
            app.state.store = Store(product_service, settings=settings)
            try:
                await app.state.store.load_catalog()
            except CatalogLoadError as e:
                # Serve an empty catalog; clients can retry via /products/refresh
                logger.warning("Initial catalog load failed: %s", e)

            yield

        finally:
            logger.info("Shutting down application...")
            await product_service.disconnect()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Bakery storefront: catalog cache, cart and order history",
        lifespan=lifespan,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.include_router(router)

    @app.exception_handler(CatalogLoadError)
    async def catalog_load_handler(request: Request, exc: CatalogLoadError) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(error="Catalog unavailable", detail=str(exc)).model_dump(),
        )

    @app.exception_handler(CatalogWriteError)
    async def catalog_write_handler(request: Request, exc: CatalogWriteError) -> JSONResponse:
        status_code = 404 if exc.status_code == 404 else 502
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error="Catalog update failed", detail=str(exc)).model_dump(),
        )

    @app.exception_handler(OrderPlacementError)
    async def order_placement_handler(request: Request, exc: OrderPlacementError) -> JSONResponse:
        return JSONResponse(
            status_code=409,
            content={
                **ErrorResponse(error="Order not placed", detail=str(exc)).model_dump(),
                "failed": exc.failed,
                "rollback_failed": exc.rollback_failed,
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler."""
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred",
            },
        )

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sweetbite.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
