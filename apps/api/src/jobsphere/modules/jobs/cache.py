"""
Job Listing Cache

Read-through Redis cache for the public job search.

Keys have the form ``jobs:<type>:<location>:<search>``. Any write to the
jobs table invalidates every listing key at once; there is no per-key
invalidation. Redis is optional: a missing client or a Redis failure
degrades to a cache miss, never to a failed request.
"""

import json
import logging
from typing import Any
from urllib.parse import quote

from fastapi import Depends
from redis.asyncio import Redis
from redis.exceptions import RedisError

from jobsphere.core.config import settings
from jobsphere.core.redis import get_redis

logger = logging.getLogger(__name__)

KEY_PREFIX = "jobs"
ALL = "ALL"


def _normalize_part(value: str | None) -> str:
    if value is None or not str(value).strip():
        return ALL
    return quote(str(value).strip().lower(), safe="")


def build_cache_key(
    job_type: str | None = None,
    location: str | None = None,
    search: str | None = None,
) -> str:
    """
    Derive the cache key for a search.

    Each part is trimmed, lower-cased and percent-encoded on its own;
    empty parts become ``ALL``. Equivalent searches share one key.

    Example:
        >>> build_cache_key("JOB", " New York ", None)
        'jobs:job:new%20york:ALL'
    """
    return ":".join(
        [
            KEY_PREFIX,
            _normalize_part(job_type),
            _normalize_part(location),
            _normalize_part(search),
        ]
    )


class ListingCache:
    """
    Job listing cache over an async Redis client.

    Passing ``None`` as the client disables caching: ``get`` always
    misses, ``set`` and ``invalidate`` do nothing.
    """

    def __init__(
        self,
        client: Redis | None,
        ttl_seconds: int = 60,
        scan_batch_size: int = 100,
    ):
        self._client = client
        self.ttl_seconds = ttl_seconds
        self.scan_batch_size = scan_batch_size

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def get(self, key: str) -> list[dict[str, Any]] | None:
        """
        Return the cached job list for `key`, or None on a miss.

        Redis errors and undecodable payloads count as misses.
        """
        if self._client is None:
            return None

        try:
            raw = await self._client.get(key)
        except RedisError as e:
            logger.error(f"Cache read failed for '{key}': {e}")
            return None

        if raw is None:
            logger.debug(f"Cache MISS: {key}")
            return None

        try:
            jobs = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error(f"Discarding corrupt cache entry '{key}': {e}")
            return None

        if not isinstance(jobs, list):
            logger.error(f"Discarding cache entry '{key}': expected a list")
            return None

        logger.debug(f"Cache HIT: {key}")
        return jobs

    async def set(self, key: str, jobs: list[dict[str, Any]]) -> None:
        """Store a job list under `key` with the configured TTL."""
        if self._client is None:
            return

        try:
            await self._client.set(key, json.dumps(jobs, default=str), ex=self.ttl_seconds)
            logger.debug(f"Cache SET: {key} (TTL: {self.ttl_seconds}s)")
        except (RedisError, TypeError, ValueError) as e:
            logger.error(f"Cache write failed for '{key}': {e}")

    async def invalidate(self) -> int:
        """
        Delete every listing key.

        Keys are collected with SCAN (not KEYS) and removed with a single
        DEL once the scan completes.

        Returns:
            Number of keys deleted (0 when disabled or on error)
        """
        if self._client is None:
            return 0

        pattern = f"{KEY_PREFIX}:*"
        try:
            keys: list[str] = []
            cursor = 0
            while True:
                cursor, batch = await self._client.scan(
                    cursor=cursor, match=pattern, count=self.scan_batch_size
                )
                keys.extend(batch)
                if int(cursor) == 0:
                    break

            if not keys:
                return 0

            deleted = await self._client.delete(*keys)
            logger.info(f"Cache invalidated: {deleted} listing keys")
            return int(deleted)
        except RedisError as e:
            logger.error(f"Cache invalidation failed: {e}")
            return 0


async def get_listing_cache(redis: Redis | None = Depends(get_redis)) -> ListingCache:
    """FastAPI dependency returning a listing cache over the shared client."""
    return ListingCache(
        redis,
        ttl_seconds=settings.jobs_cache_ttl_seconds,
        scan_batch_size=settings.jobs_cache_scan_count,
    )
