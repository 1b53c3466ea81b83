"""
Redis connection for the workflow store.

One pooled client per store, built from ``storage.uri`` or the
``REDIS_*`` settings.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from workflow_fsm.config import Settings, get_settings

logger = logging.getLogger(__name__)


class RedisConnection:
    """Owns the connection pool behind a RedisStore."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None

    @property
    def url(self) -> str:
        return self.settings.storage.uri or self.settings.redis.url

    async def init(self) -> None:
        """Open the pool and verify the server answers."""
        options = self.settings.redis
        self._pool = ConnectionPool.from_url(
            self.url,
            max_connections=options.max_connections,
            socket_timeout=options.socket_timeout,
            socket_connect_timeout=options.socket_connect_timeout,
            decode_responses=True,
        )
        self._client = redis.Redis(connection_pool=self._pool)

        await self._client.ping()
        logger.info("Redis connection established")

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

        if self._pool:
            await self._pool.disconnect()
            self._pool = None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            raise RuntimeError("Redis not initialized. Call init() first.")
        return self._client
