# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Seasonal Palette API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import get_error_logger, get_pipeline
from app.exceptions import (
    PaletteException,
    palette_exception_handler,
    validation_exception_handler,
)
from app.routers import analysis, health
from lib.security import SECURITY_HEADERS

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log configuration
    - Shutdown: close the pipeline's HTTP client if one was created
    """
    logger.info(f"Starting Seasonal Palette API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Analysis model: {settings.OPENAI_MODEL} (timeout {settings.ANALYSIS_TIMEOUT_SECONDS}s)")

    yield

    logger.info("Shutting down Seasonal Palette API")
    if get_pipeline.cache_info().currsize:
        get_pipeline().http_client.close()


# Create FastAPI application
app = FastAPI(
    title="Seasonal Palette API",
    description="""
## AI-Powered Seasonal Color Analysis

Upload a portrait photo and get a personal color palette based on the
four-season system.

### How It Works

1. **Upload** - The photo is stored (with retry) and checked for reachability
2. **Analyze** - A vision model determines skin tone, season and 3 free colors
3. **Enrich** - A second call adds 20+ premium colors, makeup tips and a wardrobe guide
4. **Fallback** - If the AI is unavailable a complete static palette is returned

### Quick Start

```bash
curl -X POST http://localhost:8000/api/v1/analyses \\
  -F "file=@me.jpg" -F "user_id=user-123"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Analyses",
            "description": "Upload a photo and run the color analysis",
        },
        {
            "name": "Health",
            "description": "API health, readiness and self tests",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(PaletteException)
async def handle_palette_exception(request: Request, exc: PaletteException):
    """Handle custom Seasonal Palette exceptions."""
    return await palette_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    get_error_logger().log_exception(exc, error_type="Unhandled Error")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Photo analysis endpoints
app.include_router(
    analysis.router,
    prefix="/api/v1/analyses",
    tags=["Analyses"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Seasonal Palette API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
