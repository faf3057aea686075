"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routes and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.adapters.store.memory import InMemoryKeyValueStore
from src.adapters.store.redis import RedisKeyValueStore, create_redis_client
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Signup Email Verification API v1 - Prove control of an institutional email address",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Connects the key-value store (Redis, or in-memory for development)
    - Creates the user database connection pool and runs migrations
    - Closes both on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    redis_client = None
    if settings.store_backend == "redis":
        redis_client = create_redis_client(settings.redis_url)
        app.state.store = RedisKeyValueStore(redis_client)
    else:
        logger.warning("Using in-memory store; verification state is per-process")
        app.state.store = InMemoryKeyValueStore()

    logger.info("Connecting to database...")
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    app.state.pool = pool

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")
    if redis_client is not None:
        redis_client.close()
        logger.info("Redis connection closed")


app = FastAPI(
    title="gangku-signup-verification",
    description="Signup Email Verification API - Single-use, time-bounded email ownership proof",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with store and database validation.

    Returns 200 OK if application, store and database are healthy.
    Raises exception if either connection fails.
    """
    request.app.state.store.ping()

    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
