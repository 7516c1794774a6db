"""
DevEvents API - Main Application Entry Point

A catalogue of tech events with user accounts and email bookings:
- Validated write path: field checks, slug derivation, reference checks
- Single shared database engine, connected once per process (single-flight)
- Redis caching of the event listing
- Structured logging with request correlation and Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from devevents.core.config import get_settings
from devevents.core.logging import setup_logging, get_logger
from devevents.core.metrics import metrics_endpoint
from devevents.api.errors import register_exception_handlers
from devevents.api.router import api_router
from devevents.api.middleware import RequestLoggingMiddleware
from devevents.db.connection import ConnectionManager
from devevents.services.cache_service import get_redis, close_redis, get_cache_stats

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    # A missing DATABASE_URL or unreachable database aborts startup here
    manager = ConnectionManager(settings)
    app.state.db = manager
    await manager.acquire()

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache")

    yield

    await manager.release()
    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Tech event catalogue with validated event, booking and user records",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Health check endpoint for Docker and load balancers."""
    manager = getattr(request.app.state, "db", None)
    database_up = manager is not None and manager.status()
    return {
        "status": "healthy" if database_up else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "connected" if database_up else "disconnected",
        "cache": await get_cache_stats(),
    }


@app.get("/metrics", include_in_schema=False)
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
