"""Leazr API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leazr.api.health import router as health_router
from leazr.api.middleware import setup_middleware
from leazr.api.products import router as products_router
from leazr.api.variant_prices import router as variant_prices_router
from leazr.domain.exceptions import (
    DomainError,
    DuplicateCombinationError,
    NotFoundError,
    ValidationError,
)
from leazr.infrastructure.config import settings
from leazr.infrastructure.logging_config import configure_logging

configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting Leazr API",
        version=settings.api_version,
        debug=settings.debug,
        variant_generation_concurrency=settings.variant_generation_concurrency,
    )

    yield

    logger.info("Shutting down Leazr API")
    from leazr.infrastructure.database import engine

    await engine.dispose()


app = FastAPI(
    title="Leazr API",
    description="Variant pricing for the leasing equipment catalog",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, API key auth, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)
app.include_router(variant_prices_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def _domain_error_status(exc: DomainError) -> tuple[int, str]:
    """Map a domain error to an HTTP status and error code."""
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND, "NOT_FOUND"
    if isinstance(exc, DuplicateCombinationError):
        return status.HTTP_409_CONFLICT, "DUPLICATE_COMBINATION"
    if isinstance(exc, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR"
    return status.HTTP_400_BAD_REQUEST, "DOMAIN_ERROR"


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Handle domain errors raised by the application services."""
    status_code, error_code = _domain_error_status(exc)
    request_id = getattr(request.state, "request_id", None)

    logger.info(
        "Request rejected",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": exc.message,
            "details": exc.details,
            "request_id": request_id,
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "request_id": request_id,
        },
    )
