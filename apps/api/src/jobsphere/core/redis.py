"""
Redis Configuration

Async Redis client backing the job listing cache.
"""

import logging

from redis.asyncio import Redis, from_url

from jobsphere.core.config import settings

logger = logging.getLogger(__name__)

# Redis client instance
redis_client: Redis | None = None


async def init_redis() -> Redis:
    """
    Initialize Redis connection.

    Call this on application startup.
    """
    global redis_client
    redis_client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    # Test connection
    await redis_client.ping()
    return redis_client


async def get_redis() -> Redis | None:
    """
    Get Redis client instance.

    Returns None if Redis is not available. Callers treat that as
    "caching disabled" and go straight to the database.
    """
    return redis_client


def is_redis_available() -> bool:
    """Check if Redis client is initialized and available."""
    return redis_client is not None


async def close_redis() -> None:
    """Close Redis connection."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis connection closed")
