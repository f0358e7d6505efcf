"""
Imager API - Main Application Entry Point.

FastAPI application exposing image variant upload and removal.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from imager.api.v1.router import api_router
from imager.config import get_settings
from imager.core.exceptions import ImagerException

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.PROJECT_NAME}")
    logger.info(f"Storage backends: {', '.join(settings.storage_backend_names)}")
    logger.info(f"Variant sets: {', '.join(settings.VARIANTS) or '(none)'}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
## Imager API

Upload images once, get every configured variant stored everywhere.

### Features
- **Variants**: original, resize, crop and resize-then-crop presets
- **Storage**: local filesystem, S3-compatible object storage, CDN-backed containers
- **Multi-backend**: each variant is written to every configured backend

### Supported Formats
- JPEG, PNG, GIF
    """,
    version="1.0.0",
    openapi_tags=[
        {"name": "images", "description": "Image variant upload and removal"},
        {"name": "health", "description": "Service health checks"},
    ],
    lifespan=lifespan,
)

# CORS middleware for browser uploads
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ImagerException)
async def imager_exception_handler(request: Request, exc: ImagerException) -> JSONResponse:
    """
    Global exception handler for imager exceptions.
    Returns standardized error responses.
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.error}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all exception handler for unexpected errors.
    Logs the full error but returns a sanitized response.
    """
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint with service info."""
    return {
        "name": settings.PROJECT_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "api": settings.API_V1_PREFIX,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "imager.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
