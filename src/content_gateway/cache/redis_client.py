"""
Redis client with connection pooling for the distributed cache tier.

Uses redis-py's asyncio client. The pool is created lazily on first use and
shared by every RedisCacheBackend in the process.
"""

from typing import Optional

import structlog
from redis.asyncio import ConnectionPool as AsyncConnectionPool
from redis.asyncio import Redis as AsyncRedis

from content_gateway.config import Settings

logger = structlog.get_logger(__name__)


class RedisClient:
    """
    Async Redis client wrapper with connection pooling.

    Socket timeouts are kept short so the startup liveness probe fails fast
    when Redis is unreachable instead of stalling application startup.
    """

    _async_pool: Optional[AsyncConnectionPool] = None

    @classmethod
    def get_async_client(cls, settings: Settings) -> AsyncRedis:
        """
        Get asynchronous Redis client with connection pooling.

        Args:
            settings: Application settings

        Returns:
            AsyncRedis client instance
        """
        if cls._async_pool is None:
            cls._async_pool = AsyncConnectionPool.from_url(
                settings.REDIS_URL,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
            logger.info("Initialized Redis async connection pool", redis_url=settings.REDIS_URL)

        return AsyncRedis(connection_pool=cls._async_pool)

    @classmethod
    async def close_async_pool(cls):
        """Close async connection pool (cleanup on shutdown)."""
        if cls._async_pool is not None:
            await cls._async_pool.disconnect()
            cls._async_pool = None
            logger.info("Closed Redis async connection pool")
