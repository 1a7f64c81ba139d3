"""
FastAPI application entry point for the event-management backend.

This module initializes the FastAPI application with:
- Exception handlers mapping service errors to 404/409/400 responses
- Shutdown of the shared statistics client
- Logging configuration

Environment Variables:
    EWM_DB_URL: Database URL (see db/database.py)
    EWM_STATS_SERVER_URL: Statistics service base URL
    EWM_ENV: Environment (production/development, default: development)
    EWM_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL, default: INFO)
"""

from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from backend.src.clients.stats_client import get_stats_client
from backend.src.db.database import dispose_engine
from backend.src.schemas.error import ApiErrorResponse
from backend.src.services.exceptions import (
    ServiceError,
    NotFoundError,
    ConflictError,
    ValidationError,
)
from backend.src.utils.logging_config import init_logging, get_logger


SERVICE_NAME = "ewm-service"
VERSION = "1.0.0"

# HTTP status and status label per service error type
_SERVICE_ERROR_STATUS = {
    NotFoundError: (status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    ConflictError: (status.HTTP_409_CONFLICT, "CONFLICT"),
    ValidationError: (status.HTTP_400_BAD_REQUEST, "BAD_REQUEST"),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: log configuration
    - Shutdown: close the statistics client if it was created and
      release database connections

    Args:
        app: FastAPI application instance

    Yields:
        Control to the application
    """
    logger = get_logger("api")
    logger.info(f"Starting {SERVICE_NAME} backend")

    yield

    logger.info(f"Shutting down {SERVICE_NAME} backend")
    if get_stats_client.cache_info().currsize:
        get_stats_client().close()
        get_stats_client.cache_clear()
    dispose_engine()


# Initialize logging before creating app
init_logging()

# Create FastAPI application
app = FastAPI(
    title="Event Management API",
    description="Events, moderation and participation requests. "
                "View counts are reconciled with the statistics service.",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


def _error_response(status_code: int, label: str, reason: str, message: str) -> JSONResponse:
    body = ApiErrorResponse.build(status=label, reason=reason, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


# Exception handlers


@app.exception_handler(ServiceError)
async def service_exception_handler(
    request: Request, exc: ServiceError
) -> JSONResponse:
    """
    Handle service-layer errors (not found, conflict, validation).

    Args:
        request: HTTP request
        exc: ServiceError subclass raised by a service

    Returns:
        JSON error body with the matching status code
    """
    status_code, label = status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR"
    for error_type, mapping in _SERVICE_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code, label = mapping
            break

    logger = get_logger("api")
    logger.info(
        f"{label}: {exc.message}",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )

    return _error_response(status_code, label, exc.reason, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed request bodies and query parameters as 400."""
    logger = get_logger("api")
    logger.warning(
        "Request validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(),
        }
    )

    message = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", ValidationError.reason, message
    )


@app.exception_handler(PydanticValidationError)
async def validation_exception_handler(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    """Handle pydantic validation errors raised while building responses."""
    logger = get_logger("api")
    logger.warning(
        "Validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(),
        }
    )

    return _error_response(
        status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", ValidationError.reason, str(exc)
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """
    Handle SQLAlchemy database errors.

    Args:
        request: HTTP request
        exc: SQLAlchemy exception

    Returns:
        JSON response with database error message
    """
    logger = get_logger("db")
    logger.error(
        "Database error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        }
    )

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "Database error.",
        "An error occurred while accessing the database. Please try again later.",
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    logger = get_logger("api")
    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error": str(exc),
        },
        exc_info=True,
    )

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "Unexpected error.",
        "An unexpected error occurred. Please try again later.",
    )


# Health check endpoint


@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        Health status and application information
    """
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
    }


# API routers
from backend.src.api import events, categories, user_events, user_requests  # noqa: E402
from backend.src.api.admin import events_router, users_router, categories_router  # noqa: E402

app.include_router(user_events.router)
app.include_router(user_requests.router)
app.include_router(events.router)
app.include_router(categories.router)
app.include_router(events_router)
app.include_router(users_router)
app.include_router(categories_router)
