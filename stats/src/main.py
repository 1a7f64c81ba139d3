"""
FastAPI application entry point for the statistics service.

Environment Variables:
    STATS_DB_URL: Database URL
    STATS_LOG_LEVEL: Log level (default: INFO)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stats.src.api import hits
from stats.src.config import get_stats_settings
from stats.src.services.hit_service import StatsValidationError


logging.basicConfig(
    level=getattr(logging, get_stats_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting statistics service")
    yield
    logger.info("Shutting down statistics service")


app = FastAPI(
    title="Statistics Service",
    description="Records request hits and reports hit counts.",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(StatsValidationError)
async def stats_validation_handler(request: Request, exc: StatsValidationError) -> JSONResponse:
    logger.info(f"Rejected stats query: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query parameters are a 400, like the main API."""
    message = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message},
    )


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "service": "stats-service"}


app.include_router(hits.router)
