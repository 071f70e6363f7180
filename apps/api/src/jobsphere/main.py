"""
JobSphere API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Database, Redis and S3 connections
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from jobsphere.api import api_router
from jobsphere.core import redis as redis_state
from jobsphere.core.config import settings
from jobsphere.core.database import async_session_maker, close_db, init_db
from jobsphere.core.redis import close_redis, init_redis
from jobsphere.core.storage import close_storage, init_storage

logging.basicConfig(
    level=logging.DEBUG if settings.is_development else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("jobsphere")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown of:
    - Redis connection (listing cache; optional outside production)
    - Database connection
    - S3 client (resume storage)
    """
    # Startup
    logger.info(f"Starting JobSphere API in {settings.python_env} mode...")

    # Initialize Redis
    try:
        await init_redis()
        logger.info("[OK] Redis connected")
    except Exception as e:
        logger.error(f"[FAIL] Redis connection failed: {e}")
        if settings.is_production:
            raise
        await close_redis()
        logger.warning("Job listing cache disabled")

    # Initialize Database
    try:
        await init_db()
        logger.info("[OK] Database connected")
    except Exception as e:
        logger.error(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    # Initialize resume storage
    storage = init_storage()
    if storage.is_configured:
        logger.info("[OK] S3 resume storage configured")
    else:
        logger.warning("S3 is not configured; resume uploads will fail")

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down JobSphere API...")

    close_storage()
    await close_redis()
    await close_db()
    logger.info("[OK] Cleanup complete")


app = FastAPI(
    title="JobSphere API",
    description="Job and internship marketplace for students, companies and administrators",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to JobSphere API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}


@app.get("/debug/db", tags=["Debug"])
async def debug_db():
    """Test database connection."""
    try:
        async with async_session_maker() as session:
            result = await session.execute(text("SELECT 1"))
            return {"database": "connected", "result": result.scalar()}
    except Exception as e:
        return {"database": "error", "message": str(e)}


@app.get("/debug/redis", tags=["Debug"])
async def debug_redis():
    """Test Redis connection."""
    client = redis_state.redis_client
    try:
        if client:
            await client.ping()
            return {"redis": "connected"}
        return {"redis": "not initialized"}
    except Exception as e:
        return {"redis": "error", "message": str(e)}
