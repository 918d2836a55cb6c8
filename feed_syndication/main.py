"""
Main FastAPI application entry point.
Configures logging, exception handlers, and routers.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from feed_syndication.api.routers import feed_router, health_router
from feed_syndication.config import get_settings
from feed_syndication.config.logging import configure_logging
from feed_syndication.core.exceptions import AppException
from feed_syndication.core.telemetry import setup_telemetry


# =============================================================================
# Lifespan (Startup/Shutdown)
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    logger = logging.getLogger(__name__)
    settings = get_settings()

    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Site: {settings.SITE_NAME} ({settings.WEB_BASE_URL})")
    logger.info(f"Images host override: {settings.IMAGES_HOST or 'none'}")

    yield

    logger.info("Shutting down application")


# =============================================================================
# Exception Handlers
# =============================================================================


async def app_exception_handler(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    """Handle custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions - return generic error."""
    logger = logging.getLogger(__name__)
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


# =============================================================================
# Application Factory
# =============================================================================


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    configure_logging(debug=settings.DEBUG)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
        Syndication Feed Service

        Renders flagged articles as RSS 2.0 feeds for third-party news apps.

        ## Feeds
        - `/feed/msn_feed`: MSN flavor, hero images as enclosures
        - `/feed/samsung_feed`: Samsung flavor, MRSS media:content and sanitized HTML
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)
    app.include_router(feed_router)

    setup_telemetry(app)

    return app


app = create_app()


# =============================================================================
# Development Entry Point
# =============================================================================


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "feed_syndication.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
