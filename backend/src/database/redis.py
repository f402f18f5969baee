"""
Redis connection for short-lived JSON values (spot price cache).

Optional: the application runs without it. Read and write failures are
logged and reported as a miss / False so callers fall through to the source.
"""

import json
from typing import Any

import redis.asyncio as redis
import structlog

logger = structlog.get_logger()


class RedisCache:
    """Async Redis client wrapper storing JSON-encoded values with a TTL."""

    def __init__(self) -> None:
        self.client: redis.Redis | None = None

    def _require_client(self) -> redis.Redis:
        if self.client is None:
            raise RuntimeError("Redis connection not established")
        return self.client

    async def connect(self, redis_url: str, timeout_seconds: float = 2.0) -> None:
        """Connect and ping; raises if Redis is unreachable."""
        self.client = redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        try:
            await self.client.ping()
        except Exception:
            await self.client.aclose()
            self.client = None
            raise
        logger.info("Redis connection established")

    async def disconnect(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            logger.info("Redis connection closed")

    async def health_check(self) -> dict[str, bool | str]:
        """Report connectivity and server version."""
        if self.client is None:
            return {"connected": False, "error": "No client connection"}
        try:
            info = await self.client.info("server")
        except Exception as e:
            logger.error("Redis health check failed", error=str(e))
            return {"connected": False, "error": str(e)}
        return {"connected": True, "version": info.get("redis_version", "unknown")}

    async def get(self, key: str) -> Any | None:
        """
        Read a JSON value.

        Returns:
            Decoded value, or None on a miss, undecodable payload or Redis error

        Raises:
            RuntimeError: If connect() has not succeeded
        """
        client = self._require_client()
        try:
            raw = await client.get(key)
        except Exception as e:
            logger.warning("Redis read failed", key=key, error=str(e))
            return None

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding non-JSON cache entry", key=key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        """
        Write a JSON value, expiring after ttl_seconds when given.

        Returns:
            True if stored, False on Redis error

        Raises:
            RuntimeError: If connect() has not succeeded
        """
        client = self._require_client()
        try:
            await client.set(key, json.dumps(value), ex=ttl_seconds)
        except Exception as e:
            logger.warning("Redis write failed", key=key, error=str(e))
            return False
        return True
