"""
Hotel Booking API

Marketplace backend where guests book hotel rooms for date ranges. Two active
bookings of one room never overlap, even when requests race. Payments and
refunds move bookings through their lifecycle via provider callbacks.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.api.middleware import RequestLoggingMiddleware
from app.api.router import api_router
from app.core.config import get_settings
from app.core.exceptions import (
    STORE_ERRORS,
    BookingAppError,
    booking_app_error_handler,
    store_error_handler,
)
from app.core.logging import get_logger, setup_logging
from app.core.metrics import metrics_endpoint
from app.db.session import AsyncSessionLocal, create_tables, dispose_engine
from app.services.cache_service import close_redis, get_cache_stats, get_redis

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        same_day_turnover=settings.ALLOW_SAME_DAY_TURNOVER,
        max_retries=settings.BOOKING_MAX_RETRIES,
    )

    if settings.DB_CREATE_TABLES:
        await create_tables()
        logger.info("database_tables_ready")

    if await get_redis() is None:
        logger.warning("room_cache_disabled")

    yield

    await close_redis()
    await dispose_engine()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Hotel booking API with conflict-free room calendars",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(BookingAppError, booking_app_error_handler)
for _store_error in STORE_ERRORS:
    app.add_exception_handler(_store_error, store_error_handler)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness plus a database round trip. 503 when the store is unreachable."""
    database = "ok"
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except STORE_ERRORS as e:
        logger.error("health_database_unreachable", error=str(e))
        database = "unreachable"

    body = {
        "status": "healthy" if database == "ok" else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": database,
        "cache": await get_cache_stats(),
    }
    code = status.HTTP_200_OK if database == "ok" else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content=body)


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "same_day_turnover": settings.ALLOW_SAME_DAY_TURNOVER,
    }
